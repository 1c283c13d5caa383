"""
Cache-Related Exceptions

Cache misses are never errors; backends return None on a miss. The only
cache exception is a setup-time configuration failure.
"""

from pixelcache.core.exceptions.base import ErrorKind, PixelCacheError


class CacheConfigurationError(PixelCacheError):
    """
    Raised when a cache backend cannot be constructed.

    This is a fatal setup error, not a runtime-retryable condition.

    Common causes:
    - Redis backend selected without a connected client
    - Unknown backend type
    """

    kind = ErrorKind.CACHE_CONFIGURATION
