"""
QuoteBook Backend — Access Logging Middleware
===============================================

What:  One log line per request on the `quotebook.access` logger.

Format:
    GET /quotes/3 404 1.8ms [a1b2c3d4] from 127.0.0.1

Level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.
Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from quotebook.middleware.request_id import request_id_var

# ── Access Logger ─────────────────────────────────────────────────────────
# Separate name so deployments can route access lines apart from app logs
logger = logging.getLogger("quotebook.access")

# Polled by supervisors every few seconds
UNLOGGED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration and request id."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in UNLOGGED_PATHS:
            return await call_next(request)

        # perf_counter: monotonic, unaffected by wall-clock adjustments
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            # Structured fields for JSON log formatters; the message stays readable
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
