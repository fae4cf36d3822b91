"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_reports.config import Settings, get_settings
from tutor_reports.database import get_db
from tutor_reports.repositories.report_repository import ReportStore
from tutor_reports.roles import Viewer, resolve_viewer
from tutor_reports.services.enrichment.workflow import EnrichmentWorkflow
from tutor_reports.services.report_service import ReportService
from tutor_reports.services.session_state import SessionState
from tutor_reports.factories.service_factories import (
    get_enrichment_workflow,
    get_report_service,
    get_report_store,
    get_session_state,
)


# Type aliases for cleaner router signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Process-wide singletons
SessionStateDep = Annotated[SessionState, Depends(get_session_state)]
WorkflowDep = Annotated[EnrichmentWorkflow, Depends(get_enrichment_workflow)]


# Request-scoped store and service
def get_report_store_dep(db: DbSession) -> ReportStore:
    """Get ReportStore with database session."""
    return get_report_store(db)


def get_report_service_dep(db: DbSession) -> ReportService:
    """Get ReportService with database session."""
    return get_report_service(db)


ReportStoreDep = Annotated[ReportStore, Depends(get_report_store_dep)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service_dep)]


# ============================================================================
# Session Dependencies
# ============================================================================


def get_current_viewer(session_state: SessionStateDep, settings: SettingsDep) -> Viewer:
    """Resolve the logged-in viewer, raise 401 if nobody is logged in."""
    identity = session_state.require_identity()
    return resolve_viewer(identity, settings)


CurrentViewer = Annotated[Viewer, Depends(get_current_viewer)]
