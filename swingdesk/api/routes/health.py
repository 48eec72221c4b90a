"""Health check endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from swingdesk.cache.client import valkey_healthcheck
from swingdesk.core.config import settings
from swingdesk.core.logging import get_logger
from swingdesk.schemas.common import HealthResponse


router = APIRouter(prefix="/health")

logger = get_logger("health")


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the API and its dependencies.",
)
async def health_check() -> HealthResponse:
    """
    Perform health check on API and dependencies.

    The cache is only checked when the Valkey backend is configured; the
    in-memory store is always available. A down cache degrades the service
    because analysis requests still succeed without persistence.
    """
    checks: dict[str, bool] = {}
    if settings.cache_backend == "valkey":
        checks["cache"] = await valkey_healthcheck()

    status = "healthy" if all(checks.values()) else "degraded"
    if status != "healthy":
        logger.warning("Health check degraded", extra={"checks": checks})

    return HealthResponse(
        status=status,
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if the API process is alive.",
)
async def liveness_check() -> dict:
    """Simple check that the process is running."""
    return {"status": "alive"}
