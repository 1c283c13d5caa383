"""
Unit Tests for cache backend selection.
"""

import pytest

from pixelcache.core.config.settings import CacheConfig
from pixelcache.core.exceptions import CacheConfigurationError
from pixelcache.infrastructure.cache import (
    DiskCacheBackend,
    MemoryCacheBackend,
    RedisCacheBackend,
    create_cache_backend,
)


@pytest.mark.unit
class TestCreateCacheBackend:
    def test_none_config_disables_cache(self):
        assert create_cache_backend(None) is None

    def test_memory(self):
        cache = create_cache_backend(CacheConfig(type="memory", ttl=60, max_entries=7))
        assert isinstance(cache, MemoryCacheBackend)
        assert cache.ttl == 60
        assert cache.max_entries == 7

    def test_disk(self, tmp_path):
        cache = create_cache_backend(CacheConfig(type="disk", path=str(tmp_path)))
        assert isinstance(cache, DiskCacheBackend)
        assert cache.path == tmp_path

    def test_redis_with_client(self, fake_redis):
        cache = create_cache_backend(CacheConfig(type="redis", ttl=30), client=fake_redis)
        assert isinstance(cache, RedisCacheBackend)
        assert cache.ttl == 30

    def test_redis_without_client_fails(self):
        with pytest.raises(CacheConfigurationError):
            create_cache_backend(CacheConfig(type="redis"))
