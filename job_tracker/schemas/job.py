from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _scalar_to_str(value):
    # Scraped payloads often carry numbers (salary, postedAt) where text is stored
    if isinstance(value, (bool, int, float)):
        return str(value).lower() if isinstance(value, bool) else str(value)
    return value


class ApplyLinkCreate(CamelModel):
    """Schema for a link nested in a job import"""
    title: Optional[str] = None
    link: Optional[str] = None

    coerce_scalars = field_validator("title", "link", mode="before")(_scalar_to_str)


class JobCreateRequest(CamelModel):
    """
    Schema for one imported job.

    Unknown keys (including any status) are ignored: new jobs always
    start as "new".
    """
    title: str
    company_name: Optional[str] = None
    location: Optional[str] = None
    via: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    posted_at: Optional[str] = None
    schedule_type: Optional[str] = None
    salary: Optional[str] = None
    apply_link: Optional[List[ApplyLinkCreate]] = Field(None, alias="applyLink")

    coerce_scalars = field_validator(
        "title", "company_name", "location", "via", "description",
        "logo", "posted_at", "schedule_type", "salary",
        mode="before",
    )(_scalar_to_str)


class JobUpdateRequest(CamelModel):
    """
    Partial update. Only the keys present in the request body are applied;
    an explicit null notes value clears the notes.
    """
    status: Optional[str] = None
    notes: Optional[str] = None


class ApplyLinkResponse(CamelModel):
    """Schema for an apply link"""
    id: int
    job_id: int
    title: Optional[str] = None
    link: Optional[str] = None


class JobResponse(CamelModel):
    """Schema for job response"""
    id: int
    title: str
    company_name: Optional[str] = None
    location: Optional[str] = None
    via: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    posted_at: Optional[str] = None
    schedule_type: Optional[str] = None
    salary: Optional[str] = None
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    apply_links: List[ApplyLinkResponse] = Field(default_factory=list, alias="applyLink")


class JobSummary(BaseModel):
    """Id and title of an imported job"""
    id: int
    title: str


class BulkCreateResponse(BaseModel):
    """Schema for bulk import response"""
    success: bool
    message: str
    jobs: List[JobSummary]


class BulkDeleteResponse(BaseModel):
    """Schema for bulk delete response"""
    success: bool
    requested: int
    deleted: int


class DeleteResponse(BaseModel):
    success: bool


class StatsResponse(BaseModel):
    """Aggregate counts for the dashboard header"""
    total: int
    new: int
    applied: int
    interviewed: int
    rejected: int
    companies: int
