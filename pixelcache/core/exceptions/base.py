"""
Base Exception Class

This module contains the base exception class, the error-kind enumeration and
the status-code table every other exception is mapped through. Specialized
exceptions live in their respective themed modules.
"""

from enum import Enum
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    """
    Tagged kinds of failure.

    Each kind maps to exactly one HTTP-equivalent status code through
    ERROR_STATUS_CODES; exceptions never carry an ad hoc status attribute.
    """

    VALIDATION = "validation"
    ACCESS_DENIED = "access_denied"
    SOURCE_FETCH = "source_fetch"
    TRANSFORM_ENGINE = "transform_engine"
    CACHE_CONFIGURATION = "cache_configuration"
    INTERNAL = "internal"


ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.SOURCE_FETCH: 500,
    ErrorKind.TRANSFORM_ENGINE: 500,
    ErrorKind.CACHE_CONFIGURATION: 500,
    ErrorKind.INTERNAL: 500,
}


def status_code_for(kind: ErrorKind) -> int:
    """Look up the status code for an error kind (500 when unmapped)."""
    return ERROR_STATUS_CODES.get(kind, 500)


class PixelCacheError(Exception):
    """
    Base exception for all image transformation cache errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling at the adapter boundary
    - Request ID correlation
    - Structured error logging
    - Rich context for debugging

    Attributes:
        message: Error message
        request_id: Request ID for correlation (if available)
        details: Additional error details (dict)
        kind: Error kind (class-level tag)

    Example:
        raise SourceFetchError(
            "Upstream returned 503",
            details={"url": "https://cdn.example.com/a.png", "attempts": 3}
        )
    """

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    def __init__(
        self, message: str, request_id: str | None = None, details: dict[str, Any] | None = None
    ):
        self.message = message
        self.request_id = request_id
        self.details = (details or {}).copy()
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        """HTTP-equivalent status code derived from the error kind."""
        return status_code_for(self.kind)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dict with error_type, kind, message, request_id, and details
        """
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value,
            "message": self.message,
            "request_id": self.request_id,
            "details": self.details,
        }

    def to_response_body(self) -> dict[str, str]:
        """Client-facing error body."""
        return {"error": self.message}

    def with_context(self, **context) -> "PixelCacheError":
        """
        Add additional context to the error details.

        Args:
            **context: Key-value pairs to add to details

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        request_id_str = f", request_id='{self.request_id}'" if self.request_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{request_id_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        request_id: str | None = None,
        **details,
    ) -> "PixelCacheError":
        """
        Create an error of this class from another exception.

        Useful for wrapping third-party exceptions (httpx, Pillow, redis)
        with additional context.

        Example:
            >>> try:
            ...     Image.open(BytesIO(data))
            ... except UnidentifiedImageError as e:
            ...     raise TransformEngineError.from_exception(e, "Cannot decode source")
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details,
        }
        return cls(error_message, request_id=request_id, details=error_details)
