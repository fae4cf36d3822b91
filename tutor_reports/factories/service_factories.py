"""Factory functions for business logic services."""

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession

from tutor_reports.config import get_settings
from tutor_reports.factories.client_factories import get_capture_device, get_llm_client
from tutor_reports.repositories.report_repository import ReportStore
from tutor_reports.services.enrichment.workflow import EnrichmentWorkflow
from tutor_reports.services.report_service import ReportService
from tutor_reports.services.session_state import SessionState


@lru_cache(maxsize=1)
def get_session_state() -> SessionState:
    """
    Create singleton session holder.

    One identity per process: the app serves a single browser tab.
    """
    return SessionState(slot_key=get_settings().session_slot_key)


@lru_cache(maxsize=1)
def get_enrichment_workflow() -> EnrichmentWorkflow:
    """Create singleton enrichment workflow owning the in-flight worksheet image."""
    settings = get_settings()
    return EnrichmentWorkflow(
        llm_client=get_llm_client(),
        capture_device=get_capture_device(),
        jpeg_quality=settings.jpeg_quality,
    )


def get_report_store(db_session: AsyncSession) -> ReportStore:
    """
    Create ReportStore bound to a session.

    Note: Not cached because depends on request-scoped db session.
    """
    return ReportStore(db_session, slot_key=get_settings().reports_slot_key)


def get_report_service(db_session: AsyncSession) -> ReportService:
    """Create ReportService with a request-scoped store."""
    return ReportService(get_report_store(db_session))
