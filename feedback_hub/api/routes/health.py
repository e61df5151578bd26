"""
Health check endpoint.
"""

import time

import structlog
from fastapi import APIRouter, Depends, Response, status

from feedback_hub.api.dependencies import get_optional_database
from feedback_hub.api.models import HealthResponse
from feedback_hub.config.settings import get_settings
from feedback_hub.storage.database import Database

router = APIRouter()
logger = structlog.get_logger(__name__)

SERVICE_VERSION = "0.1.0"


async def _check_database(db: Database | None) -> tuple[bool, float]:
    """Check database connectivity and measure latency."""
    if db is None:
        return False, 0.0

    start = time.perf_counter()
    healthy = await db.health_check()
    latency_ms = (time.perf_counter() - start) * 1000
    return healthy, round(latency_ms, 2)


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
    summary="Service health check",
    description="Check the service and its database. Returns 503 when the database is down.",
)
async def health_check(
    response: Response,
    db: Database | None = Depends(get_optional_database),
) -> HealthResponse:
    healthy, latency_ms = await _check_database(db)

    if not healthy:
        logger.warning("Health check failed: database unreachable", latency_ms=latency_ms)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        database="healthy" if healthy else "unhealthy",
        latency_ms=latency_ms,
        admin_auth_configured=get_settings().admin_auth_configured,
        version=SERVICE_VERSION,
    )
