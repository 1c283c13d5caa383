"""
Image Optimizer - transform orchestration

Architecture:
    ImageOptimizer.process()
        ├── RequestNormalizer   (validate, default, allowlist, clamp)
        ├── derive_cache_key    (canonical key)
        ├── CacheBackend        (lookup / write-through)
        ├── ImageFetcher        (source bytes for URL inputs)
        └── TransformEngine     (operations -> encoded bytes)

Flow:
    normalize -> key -> cache hit? return stored result
                     -> miss: fetch (if URL) -> transform -> ETag -> write -> return
    Buffers not tagged with a URL skip the cache (and single-flight) entirely.

The optimizer owns its cache backend; nothing in this module is a
process-wide singleton, so several optimizers with different backends can
coexist.
"""

import asyncio
import time
from collections.abc import Mapping
from typing import Any

from pixelcache.core.config.constants import CONTENT_TYPES, DEFAULT_CONTENT_TYPE, Stage
from pixelcache.core.config.settings import OptimizerConfig
from pixelcache.core.interfaces import CacheBackend, ImageFetcher, TransformEngine
from pixelcache.core.logging import get_logger, log_stage
from pixelcache.infrastructure.cache.factory import create_cache_backend
from pixelcache.infrastructure.fetch import HttpImageFetcher
from pixelcache.infrastructure.imaging import PillowTransformEngine
from pixelcache.models.transform import NormalizedRequest, TransformResult
from pixelcache.optimizer.cache_key import derive_cache_key, is_cacheable
from pixelcache.optimizer.etag import create_etag
from pixelcache.optimizer.normalizer import RequestNormalizer
from pixelcache.optimizer.pipeline import build_operations
from pixelcache.optimizer.response import ResponseMaterializer

logger = get_logger(__name__)


def content_type_for(fmt: str | None) -> str:
    if fmt is None:
        return DEFAULT_CONTENT_TYPE
    return CONTENT_TYPES.get(fmt.lower(), DEFAULT_CONTENT_TYPE)


class ImageOptimizer:
    """
    Programmatic entry point for image transformation.

    Usage:
        optimizer = ImageOptimizer(OptimizerConfig(cache=CacheConfig(type="memory")))
        result = await optimizer.process({"url": "https://cdn.example.com/a.jpg", "w": 300})

    Collaborators default to the production implementations; tests inject
    fakes for any of them.
    """

    def __init__(
        self,
        config: OptimizerConfig | None = None,
        cache: CacheBackend | None = None,
        fetcher: ImageFetcher | None = None,
        engine: TransformEngine | None = None,
        cache_client: Any = None,
    ):
        """
        Args:
            config: Optimizer configuration (defaults to OptimizerConfig())
            cache: Ready-made cache backend; overrides config.cache
            fetcher: Source fetcher (defaults to HttpImageFetcher)
            engine: Transform engine (defaults to PillowTransformEngine)
            cache_client: Redis client for config.cache.type == "redis"

        Raises:
            CacheConfigurationError: If the configured cache cannot be built
        """
        self._config = config or OptimizerConfig()
        self._cache = cache if cache is not None else create_cache_backend(
            self._config.cache, client=cache_client
        )
        self._fetcher = fetcher or HttpImageFetcher(
            timeout=self._config.fetch_timeout,
            retry_limit=self._config.fetch_retry_limit,
        )
        self._engine = engine or PillowTransformEngine()
        self._normalizer = RequestNormalizer(self._config)
        self._materializer = ResponseMaterializer(self._config.cache_ttl)
        self._in_flight: dict[str, asyncio.Future] = {}

        log_stage(
            logger,
            Stage.INITIALIZATION,
            "Image optimizer initialized",
            cache=type(self._cache).__name__ if self._cache is not None else None,
            formats=[f.value for f in self._config.formats],
            single_flight=self._config.single_flight,
        )

    @property
    def config(self) -> OptimizerConfig:
        return self._config

    @property
    def cache(self) -> CacheBackend | None:
        return self._cache

    @property
    def materializer(self) -> ResponseMaterializer:
        return self._materializer

    def build_headers(self, result: TransformResult) -> dict[str, str]:
        """Content-Type, ETag and Cache-Control for a result."""
        return self._materializer.build_headers(result)

    def normalize(
        self, request: Mapping[str, Any] | None, buffer: bytes | None = None
    ) -> NormalizedRequest:
        return self._normalizer.normalize(request, buffer=buffer)

    async def process(
        self, request: Mapping[str, Any] | None, buffer: bytes | None = None
    ) -> TransformResult:
        """
        Produce (or look up) the transformation described by request.

        Raises:
            ValidationError: Malformed parameters or no source (400)
            AccessDeniedError: Source host not allowed (403)
            SourceFetchError: Source could not be fetched (500)
            TransformEngineError: Source could not be decoded/encoded (500)
        """
        normalized = self._normalizer.normalize(request, buffer=buffer)

        if not is_cacheable(normalized):
            log_stage(logger, Stage.CACHE_KEY, "Untagged buffer, bypassing cache", level="debug")
            return await self._compute(normalized, None)

        key = derive_cache_key(normalized)
        log_stage(logger, Stage.CACHE_KEY, "Cache key derived", level="debug", key=key)

        if self._cache is not None:
            cached = await self._cache.get(key)
            if cached is not None:
                log_stage(logger, Stage.CACHE_LOOKUP, "Cache hit", size=cached.size)
                return cached
            log_stage(logger, Stage.CACHE_LOOKUP, "Cache miss")

        if not self._config.single_flight:
            return await self._compute(normalized, key)

        pending = self._in_flight.get(key)
        if pending is not None:
            log_stage(logger, Stage.CACHE_LOOKUP, "Joining in-flight transform", level="debug")
            return await asyncio.shield(pending)

        future = asyncio.get_running_loop().create_future()
        self._in_flight[key] = future
        try:
            result = await self._compute(normalized, key)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            # Mark retrieved so an unobserved failure does not warn at GC
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            self._in_flight.pop(key, None)

    async def _compute(self, normalized: NormalizedRequest, key: str | None) -> TransformResult:
        start = time.perf_counter()

        if normalized.has_buffer:
            source = normalized.buffer
        else:
            fetched = await self._fetcher.fetch(normalized.url)
            source = fetched.data

        operations = build_operations(normalized, self._config.formats)
        output = await self._engine.transform(source, operations)

        result = TransformResult(
            data=output.data,
            content_type=content_type_for(output.format),
            etag=create_etag(output.data),
            width=output.width,
            height=output.height,
        )

        if key is not None:
            await self._write_through(key, result)

        log_stage(
            logger,
            Stage.TRANSFORM,
            "Transform completed",
            content_type=result.content_type,
            size=result.size,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return result

    async def _write_through(self, key: str, result: TransformResult) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.set(key, result)
        except Exception as e:
            # The transformed image is still served when the cache is unavailable
            log_stage(
                logger,
                Stage.CACHE_WRITE,
                "Cache write failed",
                level="warning",
                error=str(e),
                error_type=type(e).__name__,
            )
