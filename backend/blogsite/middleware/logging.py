"""
Blogsite Backend — Request Logging Middleware
==============================================

What:  One log line per HTTP request with method, path, status and duration.
Why:   Shows traffic and failures without enabling uvicorn's access log.
How:   Times the downstream call and logs at a level chosen by status class.
       Health probes and OPTIONS preflights are not logged.

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, client IP, request ID
    ❌ Don't log: request bodies (post content), query strings
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from blogsite.middleware.request_id import request_id_var

logger = logging.getLogger("blogsite.access")

# Probes and CORS preflights would drown out real traffic
QUIET_PATHS = frozenset({"/health"})
QUIET_METHODS = frozenset({"OPTIONS"})


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request once its response is ready, except quiet ones."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method in QUIET_METHODS or request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        # request.client is None under the test transport
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
