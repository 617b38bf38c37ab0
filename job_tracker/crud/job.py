"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs and their apply links, providing a clean interface for the API layer.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from job_tracker.models.job import Job, JobStatus, utcnow
from job_tracker.models.apply_link import ApplyLink
from job_tracker.schemas.job import JobCreateRequest, JobUpdateRequest

# SQLite INTEGER is a signed 64-bit value; larger ids can never match a row
MAX_ID = 2 ** 63 - 1

STATS_STATUSES = (
    JobStatus.NEW,
    JobStatus.APPLIED,
    JobStatus.INTERVIEWED,
    JobStatus.REJECTED,
)


class JobNotFoundError(Exception):
    """Raised when no job matches the given id."""
    pass


class InvalidJobInputError(Exception):
    """Raised for payloads that cannot be turned into a repository call."""
    pass


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


def _build_job(job_data: JobCreateRequest) -> Job:
    db_job = Job(
        title=job_data.title,
        company_name=job_data.company_name,
        location=job_data.location,
        via=job_data.via,
        description=job_data.description,
        logo=job_data.logo,
        posted_at=_blank_to_none(job_data.posted_at),
        schedule_type=_blank_to_none(job_data.schedule_type),
        salary=_blank_to_none(job_data.salary),
        status=JobStatus.NEW.value
    )

    for link in job_data.apply_link or []:
        db_job.apply_links.append(ApplyLink(title=link.title, link=link.link))

    return db_job


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a single job with its apply links.

    Args:
        db: Database session
        job_data: Validated job data

    Returns:
        Created Job instance with id
    """
    return create_many(db, [job_data])[0]


def create_many(db: Session, jobs_data: List[JobCreateRequest]) -> List[Job]:
    """
    Insert a batch of jobs in one transaction.

    Every job starts with status "new" whatever the input says. If any
    insert fails the whole batch is rolled back and the error propagates.

    Args:
        db: Database session
        jobs_data: Validated job data, in the order to insert

    Returns:
        Created Job instances, in input order

    Raises:
        InvalidJobInputError: If jobs_data is empty
    """
    if not jobs_data:
        raise InvalidJobInputError("Expected a non-empty array of jobs")

    db_jobs = [_build_job(job_data) for job_data in jobs_data]

    try:
        db.add_all(db_jobs)
        db.commit()
    except Exception:
        db.rollback()
        raise

    for db_job in db_jobs:
        db.refresh(db_job)

    return db_jobs


def get_by_id(db: Session, job_id: int) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Args:
        db: Database session
        job_id: Job ID to retrieve

    Returns:
        Job instance if found, None otherwise
    """
    if not 0 < job_id <= MAX_ID:
        return None
    return db.query(Job).filter(Job.id == job_id).first()


def require(db: Session, job_id: int) -> Job:
    """Like get_by_id, but raises JobNotFoundError instead of returning None."""
    job = get_by_id(db, job_id)
    if not job:
        raise JobNotFoundError(f"Job {job_id} not found")
    return job


def get_multi(
    db: Session,
    status: Optional[str] = None,
    company: Optional[str] = None,
    search: Optional[str] = None
) -> List[Job]:
    """
    Retrieve all jobs matching the optional filters, newest first.

    Empty strings are treated as "no filter". Substring filters are
    case-insensitive and match % and _ literally.

    Args:
        db: Database session
        status: Exact status label
        company: Substring of the company name
        search: Substring of the title or the description

    Returns:
        List of Job instances with their apply links loaded
    """
    query = db.query(Job)

    if status:
        query = query.filter(Job.status == status)

    if company:
        query = query.filter(Job.company_name.icontains(company, autoescape=True))

    if search:
        query = query.filter(or_(
            Job.title.icontains(search, autoescape=True),
            Job.description.icontains(search, autoescape=True),
        ))

    return query.order_by(Job.created_at.desc(), Job.id.desc()).all()


def update(db: Session, job_id: int, changes: JobUpdateRequest) -> Job:
    """
    Apply a partial update and refresh updated_at.

    Only fields present in the request are touched. An empty status is
    ignored so status never becomes blank; notes may be set to None.

    Args:
        db: Database session
        job_id: Job ID to update
        changes: Partial update

    Returns:
        Updated Job instance

    Raises:
        JobNotFoundError: If the job does not exist
    """
    job = require(db, job_id)

    fields = changes.model_fields_set
    if "status" in fields and changes.status:
        job.status = changes.status
    if "notes" in fields:
        job.notes = changes.notes

    # Never move updated_at backwards, even if the clock does
    now = utcnow()
    job.updated_at = max(now, job.updated_at) if job.updated_at else now

    db.commit()
    db.refresh(job)

    return job


def delete(db: Session, job_id: int) -> None:
    """
    Delete a job by ID together with its apply links.

    Args:
        db: Database session
        job_id: Job ID to delete

    Raises:
        JobNotFoundError: If the job does not exist
    """
    job = require(db, job_id)

    db.delete(job)
    db.commit()


def _coerce_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        candidate = value
    elif isinstance(value, float) and value.is_integer():
        candidate = int(value)
    elif isinstance(value, str):
        try:
            candidate = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return candidate if 0 < candidate <= MAX_ID else None


def clean_ids(raw_ids: Iterable[Any]) -> List[int]:
    """
    Keep positive integer ids (numeric strings included), de-duplicated,
    in first-seen order.
    """
    coerced = (_coerce_id(value) for value in raw_ids)
    return list(dict.fromkeys(i for i in coerced if i is not None))


def parse_ids(payload: Any) -> List[Any]:
    """
    Extract the raw id list from a bulk delete body.

    Accepts either a bare array or an object with an "ids" array.

    Raises:
        InvalidJobInputError: If no non-empty array is found
    """
    raw_ids = payload if isinstance(payload, list) else None
    if isinstance(payload, dict):
        raw_ids = payload.get("ids")

    if not isinstance(raw_ids, list) or not raw_ids:
        raise InvalidJobInputError("Expected a non-empty array of ids")

    return raw_ids


def delete_many(db: Session, raw_ids: Iterable[Any]) -> Tuple[int, int]:
    """
    Delete every job whose id is in raw_ids.

    Ids that do not exist are not an error, they just lower the deleted
    count. Apply links go with their jobs through the foreign key cascade.

    Args:
        db: Database session
        raw_ids: Candidate ids; invalid values are dropped

    Returns:
        (requested, deleted): unique valid ids, rows actually deleted

    Raises:
        InvalidJobInputError: If no valid id remains
    """
    ids = clean_ids(raw_ids)
    if not ids:
        raise InvalidJobInputError("No valid ids provided")

    try:
        deleted = (
            db.query(Job)
            .filter(Job.id.in_(ids))
            .delete(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expire_all()
    return len(ids), deleted


def count_by_status(db: Session, status: str) -> int:
    """
    Count jobs by status.

    Args:
        db: Database session
        status: Status to count

    Returns:
        Number of jobs with given status
    """
    return db.query(func.count(Job.id)).filter(Job.status == status).scalar() or 0


def stats(db: Session) -> Dict[str, int]:
    """
    Aggregate counts: total, per well-known status, distinct companies.

    Args:
        db: Database session

    Returns:
        Dict with total, new, applied, interviewed, rejected and companies
    """
    result = {"total": db.query(func.count(Job.id)).scalar() or 0}

    for status in STATS_STATUSES:
        result[status.value] = count_by_status(db, status.value)

    result["companies"] = db.query(func.count(func.distinct(Job.company_name))).scalar() or 0

    return result
