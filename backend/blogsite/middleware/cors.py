"""
Blogsite Backend — CORS Middleware
===================================

What:  Permissive cross-origin headers on every response.
Why:   The site's pages and API may be served from different origins
       (e.g. a local dev server), and the frontend fetches with credentials.
How:   Echoes the request's Origin (with credentials allowed) or falls back to
       the `*` wildcard; answers OPTIONS preflights itself with an empty 200.

Starlette's CORSMiddleware is not used: it only emits headers when an Origin
header is present and rejects preflights for unlisted origins, while this API
always sends the headers and accepts every origin.
"""

from typing import Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


def cors_headers(origin: Optional[str]) -> Dict[str, str]:
    """Headers for a request carrying `origin` (None or "" when absent)."""
    if origin:
        headers = {
            "Access-Control-Allow-Origin": origin,
            "Vary": "Origin",
            "Access-Control-Allow-Credentials": "true",
        }
    else:
        headers = {"Access-Control-Allow-Origin": "*"}
    headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
    headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
    return headers


class CORSMiddleware(BaseHTTPMiddleware):
    """Adds CORS headers; short-circuits OPTIONS with 200 and no body."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        headers = cors_headers(request.headers.get("Origin"))

        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        response = await call_next(request)
        for name, value in headers.items():
            response.headers[name] = value
        return response
