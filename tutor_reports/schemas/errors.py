"""Error response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Machine-readable error code plus user-facing message."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Envelope returned for every handled error."""

    error: ErrorDetail
    request_id: str | None = None
    timestamp: datetime
