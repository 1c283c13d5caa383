"""
System Constants and Enumerations

This module defines system-wide constants and enumerations used across
the image transformation cache.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers
- Type-safe enums for parameter sets and stage tracking
- Easy to update and track changes
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Request processing stages for structured logging.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}

    Each stage is one suspension-point-delimited step of a request. Logs
    carry the stage value so a single request can be followed end to end:

        1.0_NORMALIZE -> 2.0_CACHE_KEY -> 3.0_CACHE_LOOKUP
            -> 4.0_SOURCE_FETCH -> 5.0_TRANSFORM -> 6.0_CACHE_WRITE
            -> 7.0_RESPOND
    """

    INITIALIZATION = "0.0_INITIALIZATION"
    NORMALIZE = "1.0_NORMALIZE"
    CACHE_KEY = "2.0_CACHE_KEY"
    CACHE_LOOKUP = "3.0_CACHE_LOOKUP"
    SOURCE_FETCH = "4.0_SOURCE_FETCH"
    TRANSFORM = "5.0_TRANSFORM"
    CACHE_WRITE = "6.0_CACHE_WRITE"
    RESPOND = "7.0_RESPOND"

    # Cross-cutting
    CACHE_BACKEND = "C_CACHE_BACKEND"
    RETRY = "R_RETRY_LOGIC"


# ============================================================================
# Transform Parameter Enumerations
# ============================================================================


class FitMode(str, Enum):
    """
    Policy for mapping a source image into the target box.

    COVER: fill the box, cropping overflow
    CONTAIN: fit inside the box, letterboxing the remainder
    FILL: stretch to the exact box, ignoring aspect ratio
    INSIDE: as large as possible without exceeding either dimension
    OUTSIDE: as small as possible while covering both dimensions
    CROP: alias of COVER kept for query-string compatibility
    """

    COVER = "cover"
    CONTAIN = "contain"
    FILL = "fill"
    INSIDE = "inside"
    OUTSIDE = "outside"
    CROP = "crop"


class OutputFormat(str, Enum):
    """Encodable output formats."""

    WEBP = "webp"
    AVIF = "avif"
    JPEG = "jpeg"
    PNG = "png"


class CropStrategy(str, Enum):
    """
    Crop anchoring when COVER discards part of the image.

    SMART: anchor on the most detailed (highest entropy) region
    CENTER: anchor on the centre
    """

    SMART = "smart"
    CENTER = "center"


class PlaceholderMode(str, Enum):
    """Placeholder generation mode."""

    NONE = "none"
    BLUR = "blur"


class CacheBackendType(str, Enum):
    """
    Cache backend variants.

    MEMORY: bounded in-process LRU with TTL
    DISK: one JSON file per key with explicit expiry
    REDIS: external key-value store with native TTL
    """

    MEMORY = "memory"
    DISK = "disk"
    REDIS = "redis"


# ============================================================================
# Request Limits and Defaults
# ============================================================================

MAX_DIMENSION = 10000  # Hard upper bound for w/h before any clamping
MIN_QUALITY = 1
MAX_QUALITY = 100
MAX_BLUR = 100
DEFAULT_QUALITY = 80

# Placeholder variant
PLACEHOLDER_WIDTH = 10
PLACEHOLDER_BLUR_SIGMA = 10.0

# ============================================================================
# Cache Defaults
# ============================================================================

MEMORY_CACHE_MAX_ENTRIES = 500
MEMORY_CACHE_DEFAULT_TTL = 3600  # 1 hour
REDIS_CACHE_DEFAULT_TTL = 3600  # 1 hour
DISK_CACHE_DEFAULT_PATH = ".cache/images"

# Sentinel source identity for raw-buffer inputs
BUFFER_SOURCE_IDENTITY = "buffer"

# ============================================================================
# ETag
# ============================================================================

ETAG_PREFIX_BYTES = 64
ETAG_CHECKSUM_MODULUS = 65536

# ============================================================================
# Fetching
# ============================================================================

FETCH_RETRY_LIMIT = 2  # Extra attempts after the first
FETCH_TIMEOUT = 10.0  # seconds
FETCH_RETRY_BASE_DELAY = 0.1  # seconds
FETCH_RETRY_MAX_DELAY = 2.0  # seconds
FETCH_RETRYABLE_STATUS_CODES = frozenset({408, 413, 429, 500, 502, 503, 504, 521, 522, 524})

# ============================================================================
# Redis Key Prefixes
# ============================================================================

REDIS_KEY_IMAGE = "pixelcache:image"

# ============================================================================
# Content Types
# ============================================================================

CONTENT_TYPES = {
    OutputFormat.WEBP.value: "image/webp",
    OutputFormat.AVIF.value: "image/avif",
    OutputFormat.JPEG.value: "image/jpeg",
    OutputFormat.PNG.value: "image/png",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# ============================================================================
# HTTP Headers
# ============================================================================

HEADER_REQUEST_ID = "X-Request-ID"
HEADER_IF_NONE_MATCH = "if-none-match"
