"""Pydantic models for the job board."""

from jobboard.models.job import (
    JobStatus,
    TextField,
    BooleanField,
    FileField,
    DynamicField,
    Job,
    JobInput
)
from jobboard.models.candidate import CandidateStatus, Candidate, CandidateProfile
from jobboard.models.auth import AuthenticatedUser, AuthSession, AdminSession
from jobboard.models.application import (
    UploadedFile,
    ApplicationSubmission,
    ContactDetails,
    SubmissionState,
    SubmissionResult
)

__all__ = [
    "JobStatus",
    "TextField",
    "BooleanField",
    "FileField",
    "DynamicField",
    "Job",
    "JobInput",
    "CandidateStatus",
    "Candidate",
    "CandidateProfile",
    "AuthenticatedUser",
    "AuthSession",
    "AdminSession",
    "UploadedFile",
    "ApplicationSubmission",
    "ContactDetails",
    "SubmissionState",
    "SubmissionResult"
]
