"""
Pytest Configuration and Shared Test Fixtures

This module provides reusable fixtures for all tests. All fixtures defined
here are automatically available to all test files.
"""

import pytest

from tests.test_fixtures import FakeClock, FakeRedis, ImageTestFactory

# pytest-asyncio runs in auto mode (see pyproject.toml), so plain
# `async def test_...` functions are collected as asyncio tests.


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """
    Keep global settings isolated per test.

    Runs each test from a temporary working directory (no stray .env, disk
    caches land in tmp_path) and drops the cached Settings singleton.
    """
    from pixelcache.core.config import settings as settings_module

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings_module, "_settings", None)
    yield
    settings_module._settings = None


@pytest.fixture
def optimizer_config():
    """Cache-less configuration accepting every output format."""
    from pixelcache.core.config.settings import OptimizerConfig

    return OptimizerConfig()


# ============================================================================
# Image Fixtures
# ============================================================================


@pytest.fixture
def red_png() -> bytes:
    """10x10 solid red PNG."""
    return ImageTestFactory.red_png()


@pytest.fixture
def wide_png() -> bytes:
    """20x10 opaque PNG."""
    return ImageTestFactory.png(20, 10)


# ============================================================================
# Fake Infrastructure Fixtures
# ============================================================================


@pytest.fixture
def frozen_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_redis(frozen_clock) -> FakeRedis:
    """In-memory Redis client sharing the frozen clock."""
    return FakeRedis(clock=frozen_clock)


@pytest.fixture
def fake_fetcher(red_png):
    """
    Fetcher stub that serves red_png for any URL and records calls.

    Set `.error` to make every fetch raise it.
    """
    from pixelcache.models.operations import FetchedImage

    class FakeFetcher:
        def __init__(self, data: bytes):
            self.data = data
            self.calls: list[str] = []
            self.error: Exception | None = None

        async def fetch(self, url: str) -> FetchedImage:
            self.calls.append(url)
            if self.error is not None:
                raise self.error
            return FetchedImage(data=self.data, content_type="image/png")

    return FakeFetcher(red_png)


@pytest.fixture
def counting_engine():
    """Real Pillow engine that counts how often it is invoked."""
    from pixelcache.infrastructure.imaging import PillowTransformEngine

    class CountingEngine(PillowTransformEngine):
        def __init__(self):
            self.calls = 0
            self.operations = []

        async def transform(self, data, operations):
            self.calls += 1
            self.operations.append(tuple(operations))
            return await super().transform(data, operations)

    return CountingEngine()


@pytest.fixture
def make_optimizer(fake_fetcher, counting_engine):
    """
    Build an ImageOptimizer wired with the fake fetcher and counting engine.

    Usage:
        optimizer = make_optimizer(cache=MemoryCacheBackend(), max_width=4000)
    """
    from pixelcache.core.config.settings import OptimizerConfig
    from pixelcache.optimizer import ImageOptimizer

    def _make(cache=None, **config):
        return ImageOptimizer(
            OptimizerConfig(**config),
            cache=cache,
            fetcher=fake_fetcher,
            engine=counting_engine,
        )

    return _make
