"""
Unit Tests for the disk result cache.
"""

import hashlib

import orjson
import pytest

from pixelcache.core.interfaces import CacheBackend
from pixelcache.infrastructure.cache import DiskCacheBackend
from pixelcache.models.transform import TransformResult


@pytest.fixture
def result() -> TransformResult:
    return TransformResult(
        data=b"\x89PNG\r\n\x1a\n\x00binary",
        content_type="image/png",
        etag='W/"f-42"',
        width=10,
        height=10,
    )


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "nested" / "images"


@pytest.mark.unit
class TestDiskCacheLayout:
    def test_satisfies_protocol(self, cache_dir):
        assert isinstance(DiskCacheBackend(cache_dir), CacheBackend)

    def test_file_name_is_sha1_of_key(self, cache_dir):
        cache = DiskCacheBackend(cache_dir)
        expected = hashlib.sha1(b"some-key").hexdigest() + ".json"
        assert cache.file_for("some-key") == cache_dir / expected

    async def test_directory_created_lazily(self, cache_dir):
        cache = DiskCacheBackend(cache_dir)
        assert not cache_dir.exists()

        assert await cache.get("k") is None
        assert cache_dir.is_dir()

    async def test_record_format(self, cache_dir, result, frozen_clock):
        cache = DiskCacheBackend(cache_dir, ttl=60, clock=frozen_clock)
        await cache.set("k", result)

        record = orjson.loads(cache.file_for("k").read_bytes())
        assert set(record) == {"value", "expires_at"}
        assert record["expires_at"] == frozen_clock.now + 60
        assert record["value"]["content_type"] == "image/png"
        assert record["value"]["etag"] == 'W/"f-42"'

    async def test_no_ttl_never_expires(self, cache_dir, result, frozen_clock):
        cache = DiskCacheBackend(cache_dir, ttl=None, clock=frozen_clock)
        await cache.set("k", result)

        record = orjson.loads(cache.file_for("k").read_bytes())
        assert record["expires_at"] is None

        frozen_clock.advance(10**9)
        assert await cache.get("k") == result

    async def test_no_temp_files_left_behind(self, cache_dir, result):
        cache = DiskCacheBackend(cache_dir)
        await cache.set("k", result)
        assert [p.suffix for p in cache_dir.iterdir()] == [".json"]


@pytest.mark.unit
class TestDiskCacheRoundTrip:
    async def test_bytes_survive(self, cache_dir, result):
        cache = DiskCacheBackend(cache_dir)
        await cache.set("k", result)

        loaded = await cache.get("k")
        assert loaded == result
        assert loaded.data == result.data

    async def test_miss_returns_none(self, cache_dir):
        assert await DiskCacheBackend(cache_dir).get("absent") is None

    async def test_shared_directory_between_instances(self, cache_dir, result):
        await DiskCacheBackend(cache_dir).set("k", result)
        assert await DiskCacheBackend(cache_dir).get("k") == result


@pytest.mark.unit
class TestDiskCacheExpiry:
    async def test_expired_record_is_deleted(self, cache_dir, result, frozen_clock):
        cache = DiskCacheBackend(cache_dir, ttl=1, clock=frozen_clock)
        await cache.set("k", result)
        frozen_clock.advance(2)

        assert await cache.get("k") is None
        assert not cache.file_for("k").exists()

    async def test_record_valid_until_expiry(self, cache_dir, result, frozen_clock):
        cache = DiskCacheBackend(cache_dir, ttl=5, clock=frozen_clock)
        await cache.set("k", result)
        frozen_clock.advance(4)

        assert await cache.get("k") == result


@pytest.mark.unit
class TestDiskCacheCorruption:
    async def test_garbage_file_reads_as_miss(self, cache_dir):
        cache = DiskCacheBackend(cache_dir)
        cache_dir.mkdir(parents=True)
        cache.file_for("k").write_bytes(b"not json")

        assert await cache.get("k") is None

    async def test_malformed_value_reads_as_miss(self, cache_dir):
        cache = DiskCacheBackend(cache_dir)
        cache_dir.mkdir(parents=True)
        cache.file_for("k").write_bytes(orjson.dumps({"value": {"data": "!!"}, "expires_at": None}))

        assert await cache.get("k") is None
