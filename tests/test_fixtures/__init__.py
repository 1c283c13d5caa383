"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .cache_factory import CacheTestFactory, FakeClock, FakeRedis
from .image_factory import ImageTestFactory
from .request_factory import SOURCE_URL, RequestTestFactory

__all__ = [
    "CacheTestFactory",
    "FakeClock",
    "FakeRedis",
    "ImageTestFactory",
    "RequestTestFactory",
    "SOURCE_URL",
]
