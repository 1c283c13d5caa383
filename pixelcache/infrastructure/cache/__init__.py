"""
Cache Module

Result cache backends (memory, disk, Redis) and the factory that picks one.
"""

from .disk_cache import DiskCacheBackend
from .factory import create_cache_backend
from .memory_cache import MemoryCacheBackend
from .redis_cache import RedisCacheBackend

__all__ = [
    "MemoryCacheBackend",
    "DiskCacheBackend",
    "RedisCacheBackend",
    "create_cache_backend",
]
