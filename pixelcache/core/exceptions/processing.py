"""
Processing Exceptions

Failures of the two external collaborators: the remote fetcher and the
image engine.
"""

from pixelcache.core.exceptions.base import ErrorKind, PixelCacheError


class SourceFetchError(PixelCacheError):
    """
    Raised when a source URL could not be fetched after the fetcher's retries.

    Common causes:
    - DNS or connection failure
    - Upstream timeout
    - Non-success HTTP status
    """

    kind = ErrorKind.SOURCE_FETCH


class TransformEngineError(PixelCacheError):
    """
    Raised when source bytes cannot be decoded or the result cannot be encoded.

    Common causes:
    - Payload is not an image
    - Encoder for the requested format unavailable
    """

    kind = ErrorKind.TRANSFORM_ENGINE
