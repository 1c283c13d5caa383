"""
In-Memory Result Cache

Bounded LRU with per-entry TTL.

STAGE-C.1: Memory backend

This is a per-process cache, not shared across workers. For a shared cache
use the Redis backend.

Implementation Details:
- OrderedDict for O(1) access and LRU ordering
- No awaits inside get/set, so each call is atomic on the event loop
- Expired entries are dropped lazily when looked up
"""

import time
from collections import OrderedDict
from collections.abc import Callable

from pixelcache.core.config.constants import (
    MEMORY_CACHE_DEFAULT_TTL,
    MEMORY_CACHE_MAX_ENTRIES,
    Stage,
)
from pixelcache.core.logging import get_logger, log_stage
from pixelcache.models.transform import TransformResult

logger = get_logger(__name__)


class MemoryCacheBackend:
    """
    In-memory LRU cache of transformation results.

    Eviction Policy:
    - When full, the least recently used entry is removed
    - A successful get() marks the entry as recently used
    - Entries older than ttl seconds are treated as absent
    """

    def __init__(
        self,
        max_entries: int = MEMORY_CACHE_MAX_ENTRIES,
        ttl: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize LRU cache.

        Args:
            max_entries: Maximum number of results to hold
            ttl: Seconds an entry stays valid (defaults to one hour)
            clock: Monotonic time source, injectable for tests
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")

        self._max_entries = max_entries
        self._ttl = ttl if ttl is not None else MEMORY_CACHE_DEFAULT_TTL
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, TransformResult]] = OrderedDict()

    async def get(self, key: str) -> TransformResult | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, result = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            log_stage(logger, Stage.CACHE_BACKEND, "Memory entry expired", level="debug", key=key)
            return None

        self._entries.move_to_end(key)
        return result

    async def set(self, key: str, result: TransformResult) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)

        self._entries[key] = (self._clock() + self._ttl, result)

        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            log_stage(logger, Stage.CACHE_BACKEND, "Memory entry evicted", level="debug", key=evicted)

    async def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def ttl(self) -> int:
        return self._ttl

    def keys(self) -> list[str]:
        """Keys in LRU order (oldest first, newest last)."""
        return list(self._entries.keys())
