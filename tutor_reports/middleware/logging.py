"""Request logging middleware."""

import time

from fastapi import Request

from tutor_reports.utils.logger import clear_request_id, get_logger, new_request_id

log = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def logging_middleware(request: Request, call_next):
    """Bind a request ID for the duration of the request and log its outcome."""
    request_id = new_request_id()
    # Read by error handlers that render after the id is cleared
    request.state.request_id = request_id
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        log.error(
            "request failed",
            method=request.method,
            path=request.url.path,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        clear_request_id()
        raise

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    log.info(
        "request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    clear_request_id()
    return response
