"""Pydantic models for job postings and their application-form fields."""

from datetime import date
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from jobboard.constants import REMOTE_LOCATION


class JobStatus(str, Enum):
    """Status of a job posting. Only active jobs are listed publicly."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class TextField(BaseModel):
    """Free-text answer on the application form."""
    id: str
    label: str
    type: Literal["text"] = "text"
    required: bool = False

    def is_satisfied(self, value: Any) -> bool:
        return isinstance(value, str) and value != ""


class BooleanField(BaseModel):
    """Yes/no answer. False is an answer; only a missing value is not."""
    id: str
    label: str
    type: Literal["boolean"] = "boolean"
    required: bool = False

    def is_satisfied(self, value: Any) -> bool:
        return isinstance(value, bool)


class FileField(BaseModel):
    """Attachment uploaded together with the application."""
    id: str
    label: str
    type: Literal["file"] = "file"
    required: bool = False

    def is_satisfied(self, value: Any) -> bool:
        return value is not None


DynamicField = Annotated[
    Union[TextField, BooleanField, FileField],
    Field(discriminator="type")
]


class Job(BaseModel):
    """Represents a job posting as shown to candidates and admins.

    Attributes:
        id: Document id assigned by the store.
        title: Job title.
        location: Free-text location, or "Remoto" for remote work.
        status: Publication status.
        applications: Number of applications received.
        posted_at: Date the job was created.
        description: Job description.
        requirements: Free-text requirements list.
        contact_email: Contact address shown on the posting.
        website: Company website.
        custom_fields: Extra inputs rendered on the application form.
    """
    id: str
    title: str = ""
    location: str = ""
    status: JobStatus = JobStatus.DRAFT
    applications: int = 0
    posted_at: date = Field(alias="postedAt")
    description: str = ""
    requirements: str = ""
    contact_email: str = Field(default="", alias="contactEmail")
    website: str = ""
    custom_fields: List[DynamicField] = Field(default_factory=list, alias="customFields")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
        use_enum_values = True

    @property
    def is_remote(self) -> bool:
        return self.location == REMOTE_LOCATION


class JobInput(BaseModel):
    """Fields an admin provides when creating a job."""
    title: str
    location: str = ""
    status: JobStatus = JobStatus.DRAFT
    description: str = ""
    requirements: Optional[str] = None
    contact_email: Optional[str] = Field(default=None, alias="contactEmail")
    website: Optional[str] = None
    custom_fields: List[DynamicField] = Field(default_factory=list, alias="customFields")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
        use_enum_values = True
