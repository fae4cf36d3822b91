"""API routers."""

from tutor_reports.routers import enrichment, health, reports, session, vocabulary

__all__ = ["enrichment", "health", "reports", "session", "vocabulary"]
