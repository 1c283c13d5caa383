"""
Health Check Routes

GET /health       - status, version and cache backend (load balancers)
GET /health/live  - liveness check, no dependency checks
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from pixelcache.api.dependencies import OptimizerDep, SettingsDep

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    """Standard health check response model."""

    status: str  # "healthy" or "degraded"
    timestamp: str  # ISO 8601
    version: str
    cache_backend: str | None = None
    components: dict | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("", response_model=HealthResponse)
async def health_check(optimizer: OptimizerDep, settings: SettingsDep):
    """
    Quick health check.

    A Redis backend is pinged; memory and disk backends are always healthy.
    A failed ping reports "degraded" with HTTP 200 since transforms still
    work without the cache.
    """
    cache = optimizer.cache
    components: dict[str, str] = {}
    status = "healthy"

    ping = getattr(cache, "ping", None)
    if ping is not None:
        components["cache"] = "healthy" if await ping() else "unhealthy"
        if components["cache"] != "healthy":
            status = "degraded"

    return HealthResponse(
        status=status,
        timestamp=_now(),
        version=settings.app.APP_VERSION,
        cache_backend=optimizer.config.cache.type.value if optimizer.config.cache else None,
        components=components or None,
    )


@router.get("/live")
async def liveness_check():
    """Liveness: the process is up and serving."""
    return {"status": "alive", "timestamp": _now()}
