"""
Blogsite Backend — Request ID Middleware
=========================================

What:  Assigns an ID to each incoming request and returns it in the response.
Why:   Lets log entries from one request be correlated, and lets the frontend
       report the ID along with an error.
How:   Reuses a client-sent X-Request-ID when it is a plain token, else generates
       a short one; stores it in a ContextVar and request.state, and echoes it
       as a response header.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client IDs are written into log lines, so only short token-like values are kept
_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")


def new_request_id() -> str:
    """Short random ID; 8 hex chars are enough to correlate one request's log lines."""
    return uuid.uuid4().hex[:8]


def resolve_request_id(client_value: Optional[str]) -> str:
    """The client's X-Request-ID when it is a plain token, otherwise a fresh one."""
    if client_value and _CLIENT_ID_PATTERN.fullmatch(client_value):
        return client_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags each request with a correlation ID and echoes it in the response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get("X-Request-ID"))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
