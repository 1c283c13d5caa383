"""
Cache Backend Protocol

This module defines the protocol every result cache implements so the
optimizer can be wired with any backend without knowing which one it got.

Architectural Decision: Protocol-based abstraction
- Memory, disk and Redis backends share no base class
- Tests can pass any object with matching async get/set
- Runtime validation with @runtime_checkable
"""

from typing import Protocol, runtime_checkable

from pixelcache.models.transform import TransformResult


@runtime_checkable
class CacheBackend(Protocol):
    """
    Protocol defining the interface for result cache backends.

    Implementations:
    - MemoryCacheBackend: bounded in-process LRU with TTL
    - DiskCacheBackend: one JSON record per key under a directory
    - RedisCacheBackend: shared store on an injected redis.asyncio client

    Contract:
    - A miss (absent, expired, unreadable) returns None, never raises
    - set() overwrites any existing entry for the key
    - Expiry is decided per backend from its configured TTL
    """

    async def get(self, key: str) -> TransformResult | None:
        """
        Look up a stored result.

        Args:
            key: Cache key derived from a normalized request

        Returns:
            TransformResult | None: Stored result, or None on a miss
        """
        ...

    async def set(self, key: str, result: TransformResult) -> None:
        """
        Store a result under key.

        Args:
            key: Cache key derived from a normalized request
            result: Finished transformation to store
        """
        ...
