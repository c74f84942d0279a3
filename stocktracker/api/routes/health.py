"""Health check endpoints.

``/health`` reports each dependency; ``/health/ready`` gates traffic on the
database alone since quotes can degrade without taking the API down.
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from stocktracker.core.config import settings
from stocktracker.database.connection import ping
from stocktracker.schemas.common import HealthResponse
from stocktracker.services.data_providers import QuoteProvider, get_quote_provider


router = APIRouter(prefix="/health", tags=["Health"])


async def db_healthcheck() -> bool:
    """True when the record store answers a trivial query."""
    return await ping()


def overall_status(checks: dict[str, bool]) -> str:
    if all(checks.values()):
        return "healthy"
    # Quotes unavailable but stored data still served
    if checks.get("database"):
        return "degraded"
    return "unhealthy"


@router.get("", response_model=HealthResponse, summary="Health check")
async def health_check(
    provider: QuoteProvider = Depends(get_quote_provider),
) -> HealthResponse:
    """Database and quote provider status.

    The provider check only looks at configuration and does not spend an
    API call.
    """
    checks = {
        "database": await db_healthcheck(),
        "quote_provider": bool(getattr(provider, "is_configured", True)),
    }
    return HealthResponse(
        status=overall_status(checks),
        version=settings.app_version,
        environment=settings.environment,
        timestamp=datetime.now(UTC),
        checks=checks,
    )


@router.get("/ready", summary="Readiness check")
async def readiness_check():
    if not await db_healthcheck():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database unavailable"},
        )
    return {"status": "ready"}


@router.get("/live", summary="Liveness check")
async def liveness_check() -> dict:
    return {"status": "alive"}
