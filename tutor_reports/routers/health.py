"""Health check router."""

from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter
from sqlalchemy import text

from tutor_reports import __version__
from tutor_reports.dependencies import DbSession, SettingsDep
from tutor_reports.schemas.health import HealthResponse, ServiceStatus
from tutor_reports.utils.logger import get_logger

router = APIRouter()
log = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession, settings: SettingsDep) -> HealthResponse:
    """
    Health check for the store and external dependencies.

    Checks:
    - Database connectivity
    - Vision model configuration
    - Capture device directory presence

    Returns:
        HealthResponse with status and service details
    """
    services = {}
    overall_status = "ok"

    try:
        await db.execute(text("SELECT 1"))
        services["database"] = ServiceStatus(status="healthy", message="Connected")
    except Exception as e:
        log.error("health check failed", service="database", error=str(e))
        services["database"] = ServiceStatus(status="unhealthy", message="Service unavailable")
        overall_status = "degraded"

    model = settings.vision_model
    provider = model.split("/", 1)[0] if "/" in model else model
    if provider != "gemini" or settings.gemini_api_key:
        services["vision"] = ServiceStatus(
            status="healthy",
            message=f"Vision provider configured: {provider}",
            details={"model": model},
        )
    else:
        log.warning("health check failed", service="vision", reason="no api key")
        services["vision"] = ServiceStatus(status="unhealthy", message="No API key configured")
        overall_status = "degraded"

    # A missing camera only disables capture; file import still works
    if Path(settings.capture_device_dir).is_dir():
        services["capture"] = ServiceStatus(status="healthy", message="Device directory present")
    else:
        services["capture"] = ServiceStatus(
            status="unhealthy",
            message="Device directory missing",
            details={"directory": settings.capture_device_dir},
        )

    return HealthResponse(
        status=overall_status,
        version=__version__,
        services=services,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
