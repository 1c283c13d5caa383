"""
Configuration Module

Centralized, type-safe configuration for the image transformation service.

Components:
-----------
- **settings.py**: Pydantic-based environment settings plus the programmatic
  OptimizerConfig / CacheConfig models the optimizer core consumes
- **constants.py**: Enums for transform parameters, limits and defaults

Usage:
------
```python
from pixelcache.core.config import get_settings

settings = get_settings()
config = settings.to_optimizer_config()
```

Environment Variables:
---------------------
```bash
CACHE_BACKEND=disk
CACHE_PATH=./.cache/images
CACHE_TTL=86400
MAX_WIDTH=4000
MAX_HEIGHT=4000
DEFAULT_QUALITY=80
SOURCE_ALLOWLIST='["example.com"]'
LOG_LEVEL=INFO
LOG_FORMAT=json
```
"""

from pixelcache.core.config.constants import (
    BUFFER_SOURCE_IDENTITY,
    CONTENT_TYPES,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_QUALITY,
    HEADER_REQUEST_ID,
    MAX_DIMENSION,
    REDIS_KEY_IMAGE,
    CacheBackendType,
    CropStrategy,
    FitMode,
    OutputFormat,
    PlaceholderMode,
    Stage,
)
from pixelcache.core.config.settings import (
    CacheConfig,
    OptimizerConfig,
    Settings,
    get_settings,
    reload_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    "CacheConfig",
    "OptimizerConfig",
    # Enums
    "Stage",
    "FitMode",
    "OutputFormat",
    "CropStrategy",
    "PlaceholderMode",
    "CacheBackendType",
    # Limits and defaults
    "MAX_DIMENSION",
    "DEFAULT_QUALITY",
    "BUFFER_SOURCE_IDENTITY",
    "REDIS_KEY_IMAGE",
    "CONTENT_TYPES",
    "DEFAULT_CONTENT_TYPE",
    # HTTP headers
    "HEADER_REQUEST_ID",
]
