"""Request and response schemas for application endpoints."""

from typing import Optional

from pydantic import BaseModel

from jobboard.models import CandidateStatus


class UpdateCandidateRequest(BaseModel):
    """Request model for updating an application. Omitted fields are left unchanged."""
    status: Optional[CandidateStatus] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    experience: Optional[str] = None
    education: Optional[str] = None
    notes: Optional[str] = None


class SendForAnalysisResponse(BaseModel):
    """Response model for sending an applicant for analysis."""
    id: str
    supplier_created: bool
    sent_for_analysis: bool
