"""Schemas for the logged-in session."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Bare display name used as identity; no verification."""

    name: str = Field(..., min_length=1, max_length=100)


class SessionResponse(BaseModel):
    """Current session identity."""

    logged_in: bool
    identity: str | None = None
    privileged: bool = False
