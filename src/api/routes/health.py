"""Health check endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.dependencies import get_profile_cache
from core.config import settings
from core.exceptions import CacheError
from infrastructure.cache.redis_profile_cache import RedisProfileCache
from infrastructure.database.session import get_async_session

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    cache: str | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies. Fast and lightweight.
    """
    return HealthResponse(
        status="healthy",
        version="1.0.0",
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
    cache: RedisProfileCache = Depends(get_profile_cache),
) -> HealthResponse:
    """
    Detailed health check including database and cache connectivity.

    The service keeps working without its cache, so a cache outage reports
    ``degraded`` rather than ``unhealthy``.
    """
    db_status = "unknown"
    cache_status = "unknown"

    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"

    try:
        await cache.ping()
        cache_status = "healthy"
    except CacheError as e:
        cache_status = f"unhealthy: {str(e)}"

    if db_status != "healthy":
        overall_status = "unhealthy"
    elif cache_status != "healthy":
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return HealthResponse(
        status=overall_status,
        version="1.0.0",
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        database=db_status,
        cache=cache_status,
    )
