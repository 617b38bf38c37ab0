import logging
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from job_tracker.core.database import get_db
from job_tracker.crud import job as job_crud
from job_tracker.schemas.job import StatsResponse

router = APIRouter(tags=["Stats"])
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)):
    """
    Totals for the tracker header: all jobs, jobs per pipeline stage, and
    the number of distinct companies.
    """
    try:
        return job_crud.stats(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to compute stats: {e}")
        raise HTTPException(status_code=500, detail=str(getattr(e, "orig", None) or e))
