"""Pydantic models for job applications and candidate identity records."""

from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field


class CandidateStatus(str, Enum):
    """Stage of an application in the hiring pipeline.

    Listed in pipeline order; admins may move an application between
    any two stages.
    """
    NEW = "new"
    TECHNICAL_EVALUATION = "technical_evaluation"
    TECHNICAL_ANALYSIS = "technical_analysis"
    INTERVIEW = "interview"
    APPROVED = "approved"
    HOMOLOGATED = "homologated"
    REJECTED = "rejected"


class Candidate(BaseModel):
    """A single application submitted against one job.

    Attributes:
        id: Document id assigned by the store.
        name: Applicant name.
        email: Applicant email.
        phone: Applicant phone.
        job_id: Job applied to.
        job_title: Job title at the time of application.
        company: Company name at the time of application.
        status: Pipeline stage.
        applied_at: Date the application was created.
        resume: Download URL of the uploaded resume.
        experience: Free-text experience summary.
        education: Free-text education summary.
        notes: Free-text notes.
        candidate_id: Identity record of the applicant.
        candidate_user_id: Authenticated user that applied.
        sent_for_analysis: Whether the applicant was exported to suppliers.
        custom_fields_data: Answers to the job's dynamic fields, by field id.
    """
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    job_id: str = Field(default="", alias="jobId")
    job_title: str = Field(default="", alias="jobTitle")
    company: str = ""
    status: CandidateStatus = CandidateStatus.NEW
    applied_at: date = Field(alias="appliedAt")
    resume: str = ""
    experience: str = ""
    education: str = ""
    notes: str = ""
    candidate_id: str = Field(default="", alias="candidateId")
    candidate_user_id: str = Field(default="", alias="candidateUserId")
    sent_for_analysis: bool = Field(default=False, alias="sentForAnalysis")
    custom_fields_data: Optional[Dict[str, Union[bool, str]]] = Field(
        default=None, alias="customFieldsData"
    )

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
        use_enum_values = True


class CandidateProfile(BaseModel):
    """Identity record of an authenticated applicant, reused across applications."""
    id: str
    user_id: str = Field(alias="userId")
    name: str = ""
    email: str = ""
    phone: str = ""
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
