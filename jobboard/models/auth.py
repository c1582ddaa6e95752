"""Pydantic models for authenticated users and admin sessions."""

from datetime import datetime

from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """User identity reported by the identity provider."""
    id: str
    email: str = ""


class AuthSession(BaseModel):
    """Result of a successful sign-in or sign-up."""
    user: AuthenticatedUser
    access_token: str = ""


class AdminSession(BaseModel):
    """Persisted admin session record.

    `token` is the bearer token that identifies the session. It is the
    storage key and is left out of the stored record.
    """
    token: str = Field(default="", exclude=True)
    email: str
    authenticated: bool = True
    login_time: datetime = Field(alias="loginTime")
    expires_at: datetime = Field(alias="expiresAt")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
