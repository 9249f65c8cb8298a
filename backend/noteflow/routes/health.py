"""
NoteFlow Backend — Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database and the completion provider and returns status.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   All dependencies operational
    - degraded:  Completion provider unavailable or unconfigured (notes still work)
    - unhealthy: Database unreachable
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy import text

from noteflow import __version__
from noteflow.database import engine
from noteflow.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """
    Probe the database with SELECT 1 and the provider with a model listing.

    Both probes are free: neither writes data nor consumes completion tokens.
    """
    db_status = "connected"
    provider_status = "available"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    client = request.app.state.completion_client
    if not client.is_configured:
        provider_status = "unconfigured"
    elif not await client.health_check():
        provider_status = "unavailable"
    if provider_status != "available" and overall != "unhealthy":
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        completion_provider=provider_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
