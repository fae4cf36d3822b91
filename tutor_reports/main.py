"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tutor_reports import __version__
from tutor_reports.config import get_settings
from tutor_reports.database import AsyncSessionLocal, engine, init_db
from tutor_reports.factories.service_factories import get_enrichment_workflow, get_session_state

# Import routers
from tutor_reports.routers import enrichment, health, reports, session, vocabulary

# Import middleware
from tutor_reports.middleware import logging_middleware, register_exception_handlers
from tutor_reports.utils.logger import configure_logging, get_logger

settings = get_settings()

# Configure logging early
configure_logging(log_level=settings.log_level, debug=settings.debug)
log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    log.info("starting application", debug=settings.debug, log_level=settings.log_level)
    await init_db()
    log.info("database initialized")

    # Configure LiteLLM
    import litellm

    litellm.suppress_debug_info = True
    litellm.set_verbose = False

    async with AsyncSessionLocal() as db:
        await get_session_state().restore(db)

    yield

    log.info("shutting down application")
    get_enrichment_workflow().reset()
    await engine.dispose()
    log.info("database connections closed")


app = FastAPI(
    title=settings.app_name,
    description="Tutoring session reports with AI worksheet analysis",
    version=__version__,
    lifespan=lifespan,
)

# Register exception handlers first
register_exception_handlers(app)

_cors_origins = settings.get_cors_origins_list()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins or ["*"],
    allow_credentials=bool(_cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging middleware
app.middleware("http")(logging_middleware)

# Register routers
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(session.router, prefix="/api/v1", tags=["Session"])
app.include_router(reports.router, prefix="/api/v1", tags=["Reports"])
app.include_router(vocabulary.router, prefix="/api/v1", tags=["Vocabulary"])
app.include_router(enrichment.router, prefix="/api/v1", tags=["Enrichment"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "endpoints": {
            "health": "/api/v1/health",
            "session": "/api/v1/session",
            "reports": "/api/v1/reports",
            "vocabulary": "/api/v1/vocabulary",
            "enrichment": "/api/v1/enrichment",
        },
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tutor_reports.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
