"""Request and response schemas for job endpoints."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from jobboard.models import DynamicField, JobInput, JobStatus


class CreateJobRequest(BaseModel):
    """Request model for creating a new job."""
    title: str = Field(min_length=1)
    location: str = ""
    status: JobStatus = JobStatus.DRAFT
    description: str = Field(min_length=10)
    requirements: Optional[str] = None
    contact_email: Optional[str] = Field(default=None, alias="contactEmail")
    website: Optional[str] = None
    custom_fields: List[DynamicField] = Field(default_factory=list, alias="customFields")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True

    def to_job_input(self) -> JobInput:
        return JobInput(**self.model_dump())


class UpdateJobRequest(BaseModel):
    """Request model for updating a job. Omitted fields are left unchanged."""
    title: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = None
    status: Optional[JobStatus] = None
    description: Optional[str] = Field(default=None, min_length=10)
    requirements: Optional[str] = None
    contact_email: Optional[str] = Field(default=None, alias="contactEmail")
    website: Optional[str] = None
    custom_fields: Optional[List[DynamicField]] = Field(default=None, alias="customFields")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class JobStatsResponse(BaseModel):
    """Dashboard counters."""
    total: int
    active: int
    inactive: int
    draft: int
    total_applications: int


class LocationsResponse(BaseModel):
    """Locations offered in the listing's location filter."""
    locations: List[str]


class DeletedResponse(BaseModel):
    """Response model for delete endpoints."""
    message: str
    id: str


def job_update_fields(request: UpdateJobRequest) -> Dict[str, object]:
    """Fields explicitly set on an update request."""
    return request.model_dump(exclude_unset=True)
