"""Structured logging setup built on structlog."""

import logging
import sys
import uuid
from contextvars import ContextVar

import structlog

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def configure_logging(log_level: str = "INFO", debug: bool = False) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: Render human-readable console output instead of JSON lines
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if debug
        else structlog.processors.JSONRenderer(ensure_ascii=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger bound to the given module name."""
    return structlog.get_logger(name)


def truncate(value: str, limit: int = 500) -> str:
    """Shorten long strings for log output."""
    if len(value) <= limit:
        return value
    return f"{value[:limit]}... [{len(value) - limit} more chars]"


def new_request_id() -> str:
    """Generate and bind a request ID for the current context."""
    request_id = uuid.uuid4().hex[:16]
    _request_id.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def clear_request_id() -> None:
    """Drop the request ID bound for the current context."""
    _request_id.set(None)
    structlog.contextvars.unbind_contextvars("request_id")


def get_request_id() -> str | None:
    """Return the request ID bound to the current context, if any."""
    return _request_id.get()
