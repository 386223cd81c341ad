"""
Blogsite Backend — Health Check Route
======================================

What:  Health check endpoint for container and load balancer probes.
How:   Pings MongoDB through the gateway and reports the result with uptime.
       healthy (200) when the ping succeeds, unhealthy (503) otherwise.
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from blogsite import __version__
from blogsite.schemas.responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(request: Request):
    database = getattr(request.app.state, "database", None)
    connected = database is not None and await database.ping()
    if not connected:
        logger.warning("Health check: database unreachable")

    body = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if connected else 503, content=body.model_dump())
