"""
Restaurants API - Health Check Route
=====================================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the attached store with SELECT 1 and reports the result.

Status levels:
    - healthy:   store reachable
    - unhealthy: store unreachable or not attached (still HTTP 200; the
                 body carries the verdict so probes can read it)
"""

import logging
import time

from fastapi import APIRouter, Request

from restaurants_api import __version__
from restaurants_api.schemas.restaurant import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    database = getattr(request.app.state, "database", None)
    reachable = database is not None and database.connected and await database.ping()
    if not reachable:
        logger.warning("Health check: restaurants store unreachable")

    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        database="connected" if reachable else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
