"""
ApplyLink model.

A named URL pointing at an application form for a job. Owned by exactly
one Job and removed together with it.
"""

from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from job_tracker.core.database import Base


class ApplyLink(Base):
    __tablename__ = "apply_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column("jobId", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=True)
    link = Column(Text, nullable=True)

    job = relationship("Job", back_populates="apply_links")

    def __repr__(self):
        return f"<ApplyLink(id={self.id}, job_id={self.job_id}, link='{self.link}')>"
