"""Schemas for the worksheet enrichment workflow."""

from pydantic import BaseModel, Field

from tutor_reports.schemas.reports import ReportDraft


class EnrichmentStatusResponse(BaseModel):
    """Workflow state and whether an image is currently held."""

    state: str
    has_image: bool
    image_bytes: int = Field(0, description="Size of the held JPEG payload")


class AnalysisResponse(BaseModel):
    """Result of an analysis request."""

    state: str
    merged: bool = Field(..., description="False when the response arrived for a discarded image")
    analysis: str | None = None
    draft: ReportDraft
