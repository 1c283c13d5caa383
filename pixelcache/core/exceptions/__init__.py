"""
Exception Module

Structured exception hierarchy for the image transformation cache.

Module Structure:
-----------------
- **base.py**: PixelCacheError base class, ErrorKind and the status-code table
- **validation.py**: ValidationError (400) and AccessDeniedError (403)
- **processing.py**: SourceFetchError and TransformEngineError (500)
- **cache.py**: CacheConfigurationError (fatal at construction)

Usage:
------
```python
from pixelcache.core.exceptions import AccessDeniedError, PixelCacheError

try:
    result = await optimizer.process({"url": url})
except PixelCacheError as exc:
    return exc.status_code, exc.to_response_body()
```
"""

from pixelcache.core.exceptions.base import (
    ERROR_STATUS_CODES,
    ErrorKind,
    PixelCacheError,
    status_code_for,
)
from pixelcache.core.exceptions.cache import CacheConfigurationError
from pixelcache.core.exceptions.processing import SourceFetchError, TransformEngineError
from pixelcache.core.exceptions.validation import AccessDeniedError, ValidationError

__all__ = [
    # Base
    "PixelCacheError",
    "ErrorKind",
    "ERROR_STATUS_CODES",
    "status_code_for",
    # Validation
    "ValidationError",
    "AccessDeniedError",
    # Processing
    "SourceFetchError",
    "TransformEngineError",
    # Cache
    "CacheConfigurationError",
]
