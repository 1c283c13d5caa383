"""
Cache key derivation.

The key is the orjson serialization of a fixed field set in a fixed order,
so it depends only on the normalized values and never on how the caller
ordered its input.
"""

import orjson

from pixelcache.core.config.constants import BUFFER_SOURCE_IDENTITY
from pixelcache.models.transform import NormalizedRequest


def source_identity(request: NormalizedRequest) -> str:
    """
    The normalized URL, also when a buffer is tagged with one.

    Untagged buffers get the sentinel identity; buffer bytes are never hashed.
    """
    if request.url is None:
        return BUFFER_SOURCE_IDENTITY
    return request.url


def is_cacheable(request: NormalizedRequest) -> bool:
    """
    Untagged buffers bypass the cache: their keys cannot tell two
    different byte payloads apart.
    """
    return request.url is not None


def derive_cache_key(request: NormalizedRequest) -> str:
    return orjson.dumps(
        {
            "u": source_identity(request),
            "w": request.width,
            "h": request.height,
            "fit": request.fit.value,
            "f": request.format.value if request.format else None,
            "q": request.quality,
            "c": request.crop.value,
            "bg": request.background,
            "bl": request.blur,
            "gs": request.grayscale,
            "r": request.rotate,
            "p": request.placeholder.value,
        }
    ).decode("utf-8")
