"""
Cache Backend Factory

Selects and constructs the cache backend described by a CacheConfig.

Usage:
    cache = create_cache_backend(CacheConfig(type="disk", path="/var/cache/img"))
    cache = create_cache_backend(CacheConfig(type="redis"), client=redis_client)
"""

from typing import Any

from pixelcache.core.config.constants import CacheBackendType, Stage
from pixelcache.core.config.settings import CacheConfig
from pixelcache.core.exceptions import CacheConfigurationError
from pixelcache.core.interfaces.cache import CacheBackend
from pixelcache.core.logging import get_logger, log_stage
from pixelcache.infrastructure.cache.disk_cache import DiskCacheBackend
from pixelcache.infrastructure.cache.memory_cache import MemoryCacheBackend
from pixelcache.infrastructure.cache.redis_cache import RedisCacheBackend

logger = get_logger(__name__)


def create_cache_backend(config: CacheConfig | None, client: Any = None) -> CacheBackend | None:
    """
    Build a cache backend.

    Args:
        config: Backend selection; None disables caching
        client: Redis client, required when config.type is redis

    Returns:
        CacheBackend | None: Constructed backend, or None when caching is off

    Raises:
        CacheConfigurationError: On an unknown type or a missing redis client
    """
    if config is None:
        return None

    if config.type == CacheBackendType.MEMORY:
        backend = MemoryCacheBackend(max_entries=config.max_entries, ttl=config.ttl)
    elif config.type == CacheBackendType.DISK:
        backend = DiskCacheBackend(path=config.path, ttl=config.ttl)
    elif config.type == CacheBackendType.REDIS:
        backend = RedisCacheBackend(client, ttl=config.ttl)
    else:
        raise CacheConfigurationError(
            f"Unknown cache backend: {config.type}", details={"backend": str(config.type)}
        )

    log_stage(
        logger,
        Stage.INITIALIZATION,
        "Cache backend created",
        backend=config.type.value,
        ttl=config.ttl,
    )
    return backend
