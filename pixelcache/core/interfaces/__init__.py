"""
Core Interfaces Module

Protocols for the optimizer's collaborators, enabling dependency injection
and easy mocking in tests.

Components:
-----------
- **cache.py**: CacheBackend protocol for result caches
- **processing.py**: ImageFetcher and TransformEngine protocols

Usage:
------
```python
from pixelcache.core.interfaces import CacheBackend

async def warm(cache: CacheBackend, key: str, result):
    if await cache.get(key) is None:
        await cache.set(key, result)
```
"""

from pixelcache.core.interfaces.cache import CacheBackend
from pixelcache.core.interfaces.processing import ImageFetcher, TransformEngine

__all__ = [
    "CacheBackend",
    "ImageFetcher",
    "TransformEngine",
]
