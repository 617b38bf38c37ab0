"""
Database models package.
"""

from job_tracker.models.job import Job, JobStatus
from job_tracker.models.apply_link import ApplyLink

__all__ = ["Job", "JobStatus", "ApplyLink"]
