"""Request and response schemas for sign-in endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr


class CredentialsRequest(BaseModel):
    """Email and password of a candidate or the admin."""
    email: EmailStr
    password: str


class AdminSessionResponse(BaseModel):
    """Response model for a started admin session."""
    access_token: str
    token_type: str = "bearer"
    email: str
    expires_at: datetime


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str
