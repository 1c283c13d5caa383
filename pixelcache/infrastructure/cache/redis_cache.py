"""
Redis Result Cache

Shared cache on a caller-supplied redis.asyncio client.

STAGE-C.3: Redis backend

Why an injected client?
- Connection pooling, auth and TLS stay the application's concern
- Tests pass a fake client with the same get/set surface

Keys are namespaced as "pixelcache:image:<cache key>"; values are the JSON
documents produced by the serializer, written with SET ... EX <ttl>.
"""

from typing import Any

from redis.exceptions import RedisError

from pixelcache.core.config.constants import REDIS_CACHE_DEFAULT_TTL, REDIS_KEY_IMAGE, Stage
from pixelcache.core.exceptions import CacheConfigurationError
from pixelcache.core.logging import get_logger, log_stage
from pixelcache.infrastructure.cache.serializer import dumps_result, loads_result
from pixelcache.models.transform import TransformResult

logger = get_logger(__name__)


class RedisCacheBackend:
    """
    Redis-backed cache of transformation results.

    Redis handles expiry itself, so get() only has to deal with absent or
    undecodable values. Connection failures propagate as redis errors; the
    optimizer decides whether they are fatal.
    """

    def __init__(self, client: Any, ttl: int | None = None):
        """
        Args:
            client: redis.asyncio.Redis (or anything with async get/set)
            ttl: Expiry in seconds (defaults to one hour)

        Raises:
            CacheConfigurationError: If no client is supplied
        """
        if client is None:
            raise CacheConfigurationError(
                "Redis cache requires a client",
                details={"backend": "redis"},
            )

        self._client = client
        self._ttl = ttl if ttl is not None else REDIS_CACHE_DEFAULT_TTL

    @property
    def ttl(self) -> int:
        return self._ttl

    @staticmethod
    def redis_key(key: str) -> str:
        return f"{REDIS_KEY_IMAGE}:{key}"

    async def get(self, key: str) -> TransformResult | None:
        raw = await self._client.get(self.redis_key(key))
        if raw is None:
            return None

        try:
            return loads_result(raw)
        except ValueError as e:
            log_stage(
                logger,
                Stage.CACHE_BACKEND,
                "Undecodable Redis cache value",
                level="warning",
                key=key,
                error=str(e),
            )
            return None

    async def set(self, key: str, result: TransformResult) -> None:
        await self._client.set(self.redis_key(key), dumps_result(result), ex=self._ttl)

    async def ping(self) -> bool:
        """Health check for the underlying client."""
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            log_stage(logger, Stage.CACHE_BACKEND, "Redis ping failed", level="warning", error=str(e))
            return False
