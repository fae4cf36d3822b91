"""Worksheet image capture, AI analysis and narrative merge."""

from tutor_reports.services.enrichment.workflow import EnrichmentState, EnrichmentWorkflow
from tutor_reports.services.enrichment.capture import (
    BaseCaptureDevice,
    CaptureHandle,
    DirectoryCaptureDevice,
)

__all__ = [
    "EnrichmentState",
    "EnrichmentWorkflow",
    "BaseCaptureDevice",
    "CaptureHandle",
    "DirectoryCaptureDevice",
]
