"""
Optimizer Module

Request normalization, cache key derivation, operation planning, the
transform orchestrator and response materialization.
"""

from .cache_key import derive_cache_key
from .etag import create_etag
from .normalizer import RequestNormalizer
from .orchestrator import ImageOptimizer
from .pipeline import build_operations
from .response import ImageResponse, ResponseMaterializer

__all__ = [
    "ImageOptimizer",
    "RequestNormalizer",
    "derive_cache_key",
    "create_etag",
    "build_operations",
    "ResponseMaterializer",
    "ImageResponse",
]
