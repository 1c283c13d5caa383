"""
Request Validation Exceptions

Raised by the request normalizer. Neither kind is ever retried; both are
surfaced verbatim to the caller.
"""

from pixelcache.core.exceptions.base import ErrorKind, PixelCacheError


class ValidationError(PixelCacheError):
    """
    Raised when request input is missing or malformed.

    Common causes:
    - Neither url nor buffer supplied
    - Dimension, quality or blur out of range
    - Unknown fit / format / crop / placeholder value
    - Non-absolute URL or unknown background colour
    """

    kind = ErrorKind.VALIDATION


class AccessDeniedError(PixelCacheError):
    """
    Raised when a source URL's hostname is not on the configured allowlist.

    A URL whose hostname cannot be determined is treated as not allowed.
    """

    kind = ErrorKind.ACCESS_DENIED
