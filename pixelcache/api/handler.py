"""
Framework-agnostic image request handler.

Maps (method, query, headers) onto the optimizer and back onto an
ImageResponse. The FastAPI route is a thin wrapper around this class; any
other HTTP framework can wrap it the same way.

Status mapping:
- GET / HEAD with a valid request: 200 (or 304 on a matching If-None-Match)
- Unsupported method: 405
- PixelCacheError: the error kind's status code with {"error": message}
- Anything else: 500 with a generic message
"""

from collections.abc import Mapping
from typing import Any

import orjson

from pixelcache.core.config.constants import HEADER_IF_NONE_MATCH, Stage
from pixelcache.core.exceptions import PixelCacheError
from pixelcache.core.logging import get_logger, log_stage
from pixelcache.optimizer.orchestrator import ImageOptimizer
from pixelcache.optimizer.response import ImageResponse

logger = get_logger(__name__)

SUPPORTED_METHODS = ("GET", "HEAD")
INTERNAL_ERROR_MESSAGE = "Internal Error"


def error_response(status: int, message: str, headers: dict[str, str] | None = None) -> ImageResponse:
    return ImageResponse(
        status=status,
        headers={"Content-Type": "application/json", **(headers or {})},
        body=orjson.dumps({"error": message}),
    )


def header_value(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header lookup over any mapping."""
    if not headers:
        return None
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


class ImageRequestHandler:
    """Serves GET/HEAD image requests through an ImageOptimizer."""

    def __init__(self, optimizer: ImageOptimizer):
        self._optimizer = optimizer

    @property
    def optimizer(self) -> ImageOptimizer:
        return self._optimizer

    async def handle(
        self,
        method: str,
        query: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None = None,
    ) -> ImageResponse:
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            return error_response(405, "Method Not Allowed", {"Allow": ", ".join(SUPPORTED_METHODS)})

        # Raw buffers are a programmatic input only
        params = {k: v for k, v in (query or {}).items() if k != "buffer"}

        try:
            result = await self._optimizer.process(params)
        except PixelCacheError as e:
            log_stage(
                logger,
                Stage.RESPOND,
                "Request failed",
                level="warning" if e.status_code < 500 else "error",
                method=method,
                error_type=type(e).__name__,
                kind=e.kind.value,
                error=e.message,
                details=e.details,
            )
            return error_response(e.status_code, e.message)
        except Exception as e:
            logger.error(
                "Unhandled error while processing image request",
                stage=Stage.RESPOND.value,
                error_type=type(e).__name__,
                error_message=str(e),
                exc_info=True,
            )
            return error_response(500, INTERNAL_ERROR_MESSAGE)

        response = self._optimizer.materializer.materialize(
            result, method, header_value(headers, HEADER_IF_NONE_MATCH)
        )
        log_stage(
            logger,
            Stage.RESPOND,
            "Image response ready",
            method=method,
            status=response.status,
            content_type=result.content_type,
        )
        return response
