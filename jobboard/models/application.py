"""Models describing a single application-submission attempt."""

from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, EmailStr, Field

from jobboard.models.candidate import Candidate


class UploadedFile(BaseModel):
    """A file selected on the application form."""
    filename: str
    content_type: str = "application/octet-stream"
    content: bytes = b""

    @property
    def size(self) -> int:
        return len(self.content)


class ApplicationSubmission(BaseModel):
    """Everything the applicant typed or attached on the form.

    Attributes:
        name: Applicant name (required).
        email: Applicant email (required, must be well formed).
        phone: Applicant phone.
        experience: Free-text experience summary.
        education: Free-text education summary.
        notes: Free-text notes.
        resume: Optional PDF resume.
        custom_field_values: Answers to text and boolean dynamic fields.
        custom_field_files: Files for file dynamic fields.
    """
    name: str = ""
    email: str = ""
    phone: str = ""
    experience: str = ""
    education: str = ""
    notes: str = ""
    resume: Optional[UploadedFile] = None
    custom_field_values: Dict[str, Union[bool, str]] = Field(default_factory=dict)
    custom_field_files: Dict[str, UploadedFile] = Field(default_factory=dict)


class ContactDetails(BaseModel):
    """Format check for the identity fields of a submission."""
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = ""


class SubmissionState(str, Enum):
    """States of one submission attempt."""
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class SubmissionResult(BaseModel):
    """Outcome of a submission attempt.

    On success `application` holds the created application. Otherwise
    `error` holds the exception that stopped the attempt and
    `error_message` its user-facing text.
    """
    state: SubmissionState
    application: Optional[Candidate] = None
    error_message: Optional[str] = None
    error: Optional[Exception] = Field(default=None, exclude=True)

    class Config:
        """Pydantic configuration."""
        arbitrary_types_allowed = True

    @property
    def succeeded(self) -> bool:
        return self.state == SubmissionState.SUCCESS
