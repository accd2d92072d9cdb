"""
RectSizer Backend: Request Context Middleware
=============================================

What:  Gives every request a correlation ID and writes one access line for it.
How:   The ID (client's X-Request-ID or a fresh short UUID) lives in a
       ContextVar; RequestIDLogFilter stamps it onto every log record, so
       module loggers never format it by hand.

Access line (logger `rectsizer.access`):
    POST /api/rectangle 200 in 10004.2ms (validation delay 10000.0ms, work 4.2ms) backing=file

    The route records time spent in the validation delay in
    `request.state.timings`; the rest of the wall time is reported as work.
    GET and /health lines have no delay part. /health is logged at DEBUG.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

access_logger = logging.getLogger("rectsizer.access")


class RequestIDLogFilter(logging.Filter):
    """Adds `request_id` to every record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        return True


def _level_for(path: str, status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    if path == "/health":
        return logging.DEBUG
    return logging.INFO


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns the request ID, echoes it back, and logs the access line."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid
        request.state.timings = {}

        started = time.perf_counter()
        response = await call_next(request)
        total_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = rid

        store = request.app.state.rectangle_store
        backing = "file" if store.is_durable else "memory"
        delay_ms = request.state.timings.get("delay_ms")
        if delay_ms is None:
            timing = f"in {total_ms:.1f}ms"
        else:
            timing = (
                f"in {total_ms:.1f}ms (validation delay {delay_ms:.1f}ms, "
                f"work {max(total_ms - delay_ms, 0.0):.1f}ms)"
            )

        access_logger.log(
            _level_for(request.url.path, response.status_code),
            "%s %s %d %s backing=%s",
            request.method,
            request.url.path,
            response.status_code,
            timing,
            backing,
        )
        return response
