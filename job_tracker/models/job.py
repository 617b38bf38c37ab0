import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from sqlalchemy.orm import relationship
from job_tracker.core.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite stores datetimes without an offset)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class JobStatus(str, enum.Enum):
    """
    Pipeline labels the tracker knows about.

    The status column is free text: callers may store any other label,
    these are only the well-known ones.
    """
    NEW = "new"
    INTERESTED = "interested"
    APPLIED = "applied"
    INTERVIEWED = "interviewed"
    REJECTED = "rejected"
    NOT_INTERESTED = "not-interested"


class Job(Base):
    """
    A tracked job posting and where it sits in the user's pipeline.

    Column names are camelCase so databases written by earlier versions of
    the tracker open unchanged.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    company_name = Column("companyName", Text, nullable=True)
    location = Column(Text, nullable=True)
    via = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    logo = Column(Text, nullable=True)
    posted_at = Column("postedAt", Text, nullable=True)
    schedule_type = Column("scheduleType", Text, nullable=True)
    salary = Column(Text, nullable=True)

    status = Column(String, nullable=False, default=JobStatus.NEW.value, server_default=JobStatus.NEW.value)
    notes = Column(Text, nullable=True)

    created_at = Column("createdAt", DateTime, nullable=False, default=utcnow)
    updated_at = Column("updatedAt", DateTime, nullable=False, default=utcnow)

    # Relationships
    apply_links = relationship(
        "ApplyLink",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="ApplyLink.id",
    )

    __table_args__ = (
        Index("idx_jobs_status", "status"),
        Index("idx_jobs_company", "companyName"),
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', status={self.status})>"
