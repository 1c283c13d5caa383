"""
Request Normalizer

Turns a raw parameter bag into a NormalizedRequest.

STAGE-1: Normalize

Order of checks:
1. Parse and validate every field (ValidationError, 400)
2. Require a source, url or buffer (ValidationError, 400)
3. Source allowlist for URL inputs (AccessDeniedError, 403)
4. Clamp width/height to the configured maxima (silent)
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from pydantic import ValidationError as PydanticValidationError

from pixelcache.core.config.constants import Stage
from pixelcache.core.config.settings import OptimizerConfig
from pixelcache.core.exceptions import AccessDeniedError, ValidationError
from pixelcache.core.logging import get_logger, log_stage
from pixelcache.models.transform import NormalizedRequest, TransformParams

logger = get_logger(__name__)


def describe_validation_error(exc: PydanticValidationError) -> str:
    """First validation problem as a one-line message."""
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ())) or "request"
    return f"Invalid parameter '{location}': {error.get('msg', 'invalid value')}"


def hostname_allowed(url: str, allowlist: tuple[str, ...]) -> bool:
    """
    True when url's hostname ends with one of the allowlisted suffixes.

    URLs without a parseable hostname are never allowed.
    """
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return False
    if not hostname:
        return False
    return any(hostname.endswith(suffix.lower()) for suffix in allowlist)


class RequestNormalizer:
    """
    Validates, defaults, authorizes and clamps transform requests.

    Stateless apart from its configuration; safe to share between requests.
    """

    def __init__(self, config: OptimizerConfig):
        self._config = config

    def normalize(self, raw: Mapping[str, Any] | None, buffer: bytes | None = None) -> NormalizedRequest:
        """
        Args:
            raw: Parameter bag (query values or programmatic values). A
                "buffer" entry is honoured when no buffer argument is given.
            buffer: Raw source image bytes

        Returns:
            NormalizedRequest: Canonical request

        Raises:
            ValidationError: Malformed parameters or no source
            AccessDeniedError: URL host outside the allowlist
        """
        params = dict(raw or {})
        if buffer is None:
            buffer = params.pop("buffer", None)
        else:
            params.pop("buffer", None)

        if buffer is not None and not isinstance(buffer, (bytes, bytearray, memoryview)):
            raise ValidationError("Invalid parameter 'buffer': expected bytes")

        try:
            parsed = TransformParams.model_validate(params)
        except PydanticValidationError as e:
            message = describe_validation_error(e)
            log_stage(logger, Stage.NORMALIZE, "Rejected request", level="info", reason=message)
            raise ValidationError(message, details={"errors": e.errors(include_url=False)}) from e

        url = str(parsed.url) if parsed.url is not None else None

        if buffer is None and url is None:
            raise ValidationError("No input provided")

        allowlist = self._config.source_allowlist
        if allowlist and buffer is None and not hostname_allowed(url, allowlist):
            log_stage(logger, Stage.NORMALIZE, "Source host not allowed", level="warning", url=url)
            raise AccessDeniedError("Source URL not allowed", details={"url": url})

        width, height = parsed.w, parsed.h
        if self._config.max_width and width and width > self._config.max_width:
            width = self._config.max_width
        if self._config.max_height and height and height > self._config.max_height:
            height = self._config.max_height

        return NormalizedRequest(
            url=url,
            buffer=bytes(buffer) if buffer is not None else None,
            width=width,
            height=height,
            fit=parsed.fit,
            format=parsed.format,
            quality=parsed.quality if parsed.quality is not None else self._config.default_quality,
            crop=parsed.crop,
            background=parsed.bg,
            blur=parsed.blur,
            grayscale=parsed.grayscale,
            rotate=parsed.rotate,
            placeholder=parsed.placeholder,
        )
