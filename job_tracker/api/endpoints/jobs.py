import logging
from typing import Any, List, Optional
from fastapi import APIRouter, Body, HTTPException, Depends
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from job_tracker.core.database import get_db
from job_tracker.crud import job as job_crud
from job_tracker.crud.job import JobNotFoundError, InvalidJobInputError
from job_tracker.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobResponse,
    JobSummary,
    BulkCreateResponse,
    BulkDeleteResponse,
    DeleteResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)

_job_list_adapter = TypeAdapter(List[JobCreateRequest])


def _storage_failure(db: Session, action: str, error: SQLAlchemyError) -> HTTPException:
    """Roll back, log and turn a storage error into a 500 carrying its message."""
    db.rollback()
    logger.error(f"Error {action}: {error}")
    message = str(getattr(error, "orig", None) or error)
    return HTTPException(status_code=500, detail=message)


# Bulk routes are registered before /{job_id} so "bulk" is never read as an id

@router.post("/bulk", response_model=BulkCreateResponse)
def bulk_create_jobs(payload: Any = Body(...), db: Session = Depends(get_db)):
    """
    Import a JSON array of jobs in one transaction.

    Every imported job starts with status "new". Either all jobs (and their
    apply links) are stored or none are.
    """
    if not isinstance(payload, list) or not payload:
        raise HTTPException(status_code=400, detail="Expected a non-empty array of jobs")

    try:
        jobs_data = _job_list_adapter.validate_python(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid job payload: {e.errors(include_url=False)}")

    try:
        created = job_crud.create_many(db, jobs_data)
    except SQLAlchemyError as e:
        raise _storage_failure(db, "adding jobs", e)

    logger.info(f"Imported {len(created)} jobs")

    return BulkCreateResponse(
        success=True,
        message=f"Added {len(created)} jobs",
        jobs=[JobSummary(id=job.id, title=job.title) for job in created]
    )


@router.delete("/bulk", response_model=BulkDeleteResponse)
def bulk_delete_jobs(payload: Any = Body(...), db: Session = Depends(get_db)):
    """
    Delete several jobs at once.

    Accepts either `[1, 2, 3]` or `{"ids": [1, 2, 3]}`. Ids that don't exist
    are skipped, so `deleted` can be lower than `requested`.
    """
    try:
        requested, deleted = job_crud.delete_many(db, job_crud.parse_ids(payload))
    except InvalidJobInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise _storage_failure(db, "deleting jobs", e)

    logger.info(f"Bulk delete: requested={requested} deleted={deleted}")

    return BulkDeleteResponse(success=True, requested=requested, deleted=deleted)


@router.get("", response_model=list[JobResponse])
def list_jobs(
    status: Optional[str] = None,
    company: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List jobs, newest first, each with its apply links.

    Args:
        status: Exact status label (new, applied, ...)
        company: Case-insensitive substring of the company name
        search: Case-insensitive substring of the title or description
    """
    try:
        return job_crud.get_multi(db, status=status, company=company, search=search)
    except SQLAlchemyError as e:
        raise _storage_failure(db, "fetching jobs", e)


@router.post("", status_code=201, response_model=JobResponse)
def create_job(request: JobCreateRequest, db: Session = Depends(get_db)):
    """
    Add a single job. Like the bulk import, it always starts as "new".
    """
    try:
        new_job = job_crud.create(db, request)
    except SQLAlchemyError as e:
        raise _storage_failure(db, "creating job", e)

    logger.info(f"Created job {new_job.id}: {new_job.title}")
    return new_job


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.
    """
    try:
        return job_crud.require(db, job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    except SQLAlchemyError as e:
        raise _storage_failure(db, f"fetching job {job_id}", e)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(job_id: int, request: JobUpdateRequest, db: Session = Depends(get_db)):
    """
    Change a job's status and/or notes.

    Fields missing from the body keep their value; updatedAt always moves.
    """
    try:
        job = job_crud.update(db, job_id, request)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    except SQLAlchemyError as e:
        raise _storage_failure(db, f"updating job {job_id}", e)

    logger.info(f"Updated job {job_id}: {sorted(request.model_fields_set)}")
    return job


@router.delete("/{job_id}", response_model=DeleteResponse)
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID, along with its apply links.
    """
    try:
        job_crud.delete(db, job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    except SQLAlchemyError as e:
        raise _storage_failure(db, f"deleting job {job_id}", e)

    logger.info(f"Deleted job {job_id}")
    return DeleteResponse(success=True)
