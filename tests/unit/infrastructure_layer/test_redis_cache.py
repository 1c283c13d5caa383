"""
Unit Tests for the Redis result cache.
"""

import pytest

from pixelcache.core.exceptions import CacheConfigurationError
from pixelcache.core.interfaces import CacheBackend
from pixelcache.infrastructure.cache import RedisCacheBackend
from pixelcache.models.transform import TransformResult
from tests.test_fixtures import CacheTestFactory


@pytest.fixture
def result() -> TransformResult:
    return TransformResult(data=b"RIFF....WEBP", content_type="image/webp", etag='W/"c-7"')


@pytest.mark.unit
class TestRedisCacheConstruction:
    def test_requires_client(self):
        with pytest.raises(CacheConfigurationError) as exc_info:
            RedisCacheBackend(None)
        assert exc_info.value.status_code == 500

    def test_default_ttl(self, fake_redis):
        assert RedisCacheBackend(fake_redis).ttl == 3600

    def test_satisfies_protocol(self, fake_redis):
        assert isinstance(RedisCacheBackend(fake_redis), CacheBackend)


@pytest.mark.unit
class TestRedisCacheOperations:
    async def test_round_trip(self, fake_redis, result):
        cache = RedisCacheBackend(fake_redis)
        await cache.set("k", result)

        assert await cache.get("k") == result

    async def test_keys_are_namespaced_and_expire_natively(self, fake_redis, result):
        cache = RedisCacheBackend(fake_redis, ttl=120)
        await cache.set("k", result)

        assert fake_redis.set_calls == [("pixelcache:image:k", 120)]
        assert "pixelcache:image:k" in fake_redis.data

    async def test_accepts_str_values(self, fake_redis, result):
        cache = RedisCacheBackend(fake_redis)
        await cache.set("k", result)
        raw = fake_redis.data["pixelcache:image:k"]
        fake_redis.data["pixelcache:image:k"] = raw.decode("utf-8")

        assert await cache.get("k") == result

    async def test_miss(self, fake_redis):
        assert await RedisCacheBackend(fake_redis).get("absent") is None

    async def test_expired_entry_is_absent(self, fake_redis, frozen_clock, result):
        cache = RedisCacheBackend(fake_redis, ttl=1)
        await cache.set("k", result)
        frozen_clock.advance(2)

        assert await cache.get("k") is None
        assert "pixelcache:image:k" not in fake_redis.data

    async def test_undecodable_value_is_a_miss(self, fake_redis):
        fake_redis.data["pixelcache:image:k"] = b"{broken"
        assert await RedisCacheBackend(fake_redis).get("k") is None

    async def test_client_errors_propagate(self, result):
        cache = RedisCacheBackend(CacheTestFactory.failing_redis_client())
        with pytest.raises(ConnectionError):
            await cache.set("k", result)


@pytest.mark.unit
class TestRedisCachePing:
    async def test_ping_healthy(self, fake_redis):
        assert await RedisCacheBackend(fake_redis).ping() is True

    async def test_ping_redis_error_is_unhealthy(self):
        from redis.exceptions import ConnectionError as RedisConnectionError

        client = CacheTestFactory.failing_redis_client(RedisConnectionError("down"))
        assert await RedisCacheBackend(client).ping() is False
