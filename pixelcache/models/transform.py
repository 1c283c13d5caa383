"""
Transform request and result models.

TransformParams is the validation grammar for raw input (query strings or
programmatic values). NormalizedRequest is the canonical parameter set the
cache key is derived from. TransformResult is what the cache stores and the
HTTP adapter serves.
"""

from dataclasses import dataclass, field
from typing import Any

from PIL import ImageColor
from pydantic import AnyUrl, BaseModel, ConfigDict, Field, field_validator

from pixelcache.core.config.constants import (
    MAX_BLUR,
    MAX_DIMENSION,
    MAX_QUALITY,
    MIN_QUALITY,
    CropStrategy,
    FitMode,
    OutputFormat,
    PlaceholderMode,
)


class TransformParams(BaseModel):
    """
    Raw transform parameters as they arrive from a caller.

    Field names follow the public query-string surface (w, h, bg, ...).
    Query-string values are coerced (e.g. "300" -> 300, "true" -> True);
    anything outside the documented ranges is rejected.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: AnyUrl | None = Field(default=None, description="Absolute source URL")
    w: int | None = Field(default=None, gt=0, le=MAX_DIMENSION, description="Target width")
    h: int | None = Field(default=None, gt=0, le=MAX_DIMENSION, description="Target height")
    fit: FitMode = Field(default=FitMode.COVER, description="Fit mode")
    format: OutputFormat | None = Field(default=None, description="Output format (None = keep)")
    quality: int | None = Field(default=None, ge=MIN_QUALITY, le=MAX_QUALITY)
    crop: CropStrategy = Field(default=CropStrategy.CENTER, description="Crop strategy")
    bg: str | None = Field(default=None, min_length=1, description="Background colour")
    blur: float | None = Field(
        default=None, ge=0, le=MAX_BLUR, allow_inf_nan=False, description="Blur sigma"
    )
    grayscale: bool = Field(default=False, description="Convert to grayscale")
    rotate: float = Field(default=0.0, allow_inf_nan=False, description="Rotation in degrees")
    placeholder: PlaceholderMode = Field(default=PlaceholderMode.NONE)

    @field_validator("url", "format", "bg", "w", "h", "quality", "blur", mode="before")
    @classmethod
    def empty_string_is_absent(cls, v):
        """Treat `?w=` style empty query values as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("rotate", mode="before")
    @classmethod
    def empty_rotation_is_zero(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0.0
        return v

    @field_validator("url")
    @classmethod
    def require_host(cls, v):
        """Source URLs must carry a host."""
        if v is not None and not v.host:
            raise ValueError("url must be an absolute URL with a host")
        return v

    @field_validator("bg")
    @classmethod
    def validate_colour(cls, v):
        """Background must be a colour Pillow can parse (#fff, red, rgb(...))."""
        if v is not None:
            try:
                ImageColor.getrgb(v)
            except ValueError as e:
                raise ValueError(f"unknown colour {v!r}") from e
        return v


class NormalizedRequest(BaseModel):
    """
    Canonical, immutable transform request.

    Produced only by RequestNormalizer. Dimensions are already clamped and
    quality is already resolved to the configured default, so two requests
    for the same effective output compare equal field by field.

    The raw buffer rides along for the orchestrator but takes no part in
    equality, hashing or repr.
    """

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    buffer: bytes | None = Field(default=None, exclude=True, repr=False)
    width: int | None = None
    height: int | None = None
    fit: FitMode = FitMode.COVER
    format: OutputFormat | None = None
    quality: int
    crop: CropStrategy = CropStrategy.CENTER
    background: str | None = None
    blur: float | None = None
    grayscale: bool = False
    rotate: float = 0.0
    placeholder: PlaceholderMode = PlaceholderMode.NONE

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, NormalizedRequest):
            return NotImplemented
        return self.model_dump() == other.model_dump()

    def __hash__(self) -> int:
        return hash(tuple(self.model_dump().items()))

    @property
    def has_buffer(self) -> bool:
        return self.buffer is not None


@dataclass(frozen=True)
class TransformResult:
    """
    A finished transformation.

    Created once per cache miss and stored verbatim; cache hits return the
    stored instance (or its decoded copy) including the original ETag.

    Attributes:
        data: Encoded image bytes
        content_type: MIME type of data
        etag: Weak validator, see pixelcache.optimizer.etag
        width: Output width in pixels (if known)
        height: Output height in pixels (if known)
    """

    data: bytes = field(repr=False)
    content_type: str
    etag: str
    width: int | None = None
    height: int | None = None

    @property
    def size(self) -> int:
        return len(self.data)
