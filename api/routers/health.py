"""
Health check endpoints.

- GET /api/health - Liveness, public
- GET /api/ai/health - Providers, catalog and backing services, admin only
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text

from api.dependencies import RequestContext, require_admin
from api.schemas.common import (
    AIHealthResponse,
    ComponentHealth,
    HealthCheckResponse,
    HealthStatus,
)
from core.config import Settings, get_settings
from core.redis import RedisHealthCheck
from services.providers import estimate_gemini_cost, get_provider, list_provider_names

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Basic health check",
    description="Quick health check endpoint for load balancers and container orchestration.",
)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthCheckResponse:
    return HealthCheckResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        service=settings.service_name,
        version=settings.app_version,
    )


async def _database_health(ctx: RequestContext) -> ComponentHealth:
    start = time.perf_counter()
    try:
        await ctx.session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return ComponentHealth(status=HealthStatus.UNHEALTHY, error=str(e))
    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
    )


async def _redis_health() -> ComponentHealth:
    redis_health = await RedisHealthCheck.check()
    if redis_health["status"] == "healthy":
        return ComponentHealth(status=HealthStatus.HEALTHY, latency_ms=redis_health["latency_ms"])
    if redis_health["status"] == "not_initialized":
        # Redis is optional; only cooldowns depend on it
        return ComponentHealth(status=HealthStatus.DEGRADED, error="Redis not initialized")
    return ComponentHealth(status=HealthStatus.UNHEALTHY, error=redis_health.get("error"))


@router.get(
    "/ai/health",
    response_model=AIHealthResponse,
    summary="AI pipeline health",
    description="Provider availability, catalog counts, cost configuration and component health.",
)
async def ai_health_check(ctx: RequestContext = Depends(require_admin)) -> AIHealthResponse:
    settings = ctx.settings

    providers = {}
    for name in list_provider_names():
        providers[name] = get_provider(name).info()
    default_available = providers.get(settings.default_provider, {}).get("available", False)

    catalog = {
        "styles": await ctx.catalog.count_styles(),
        "room_types": await ctx.catalog.count_room_types(),
    }

    components = {
        "database": await _database_health(ctx),
        "redis": await _redis_health(),
    }

    if components["database"].status == HealthStatus.UNHEALTHY or not default_available:
        status = HealthStatus.UNHEALTHY
    elif any(c.status != HealthStatus.HEALTHY for c in components.values()) or catalog["styles"] == 0:
        status = HealthStatus.DEGRADED
    else:
        status = HealthStatus.HEALTHY

    return AIHealthResponse(
        status=status,
        timestamp=datetime.now(timezone.utc),
        providers=providers,
        catalog=catalog,
        costs={
            "tokens_per_generation": settings.token_cost_per_generation,
            "signup_bonus_tokens": settings.signup_bonus_tokens,
            "gemini_estimated_usd": estimate_gemini_cost(0, 0),
        },
        environment={
            "gemini_api_key": settings.is_gemini_configured,
            "runware_api_key": settings.is_runware_configured,
            "r2_storage": settings.is_r2_configured,
            "database": settings.is_database_configured,
            "redis": settings.redis_enabled,
        },
        components=components,
    )
