"""
Operation set builder.

Translates a NormalizedRequest into the ordered operations the engine runs:
resize, flatten, blur, grayscale, rotate, placeholder, encode.
"""

from collections.abc import Iterable

from pixelcache.core.config.constants import (
    PLACEHOLDER_BLUR_SIGMA,
    PLACEHOLDER_WIDTH,
    CropStrategy,
    FitMode,
    OutputFormat,
    PlaceholderMode,
)
from pixelcache.models.operations import (
    Blur,
    Encode,
    Flatten,
    Grayscale,
    Operation,
    Resize,
    ResizePosition,
    Rotate,
)
from pixelcache.models.transform import NormalizedRequest


def resolve_output_format(
    requested: OutputFormat | None, allowed_formats: Iterable[OutputFormat]
) -> OutputFormat | None:
    """Requested format if allowed, else None (keep the source format)."""
    if requested is not None and requested in set(allowed_formats):
        return requested
    return None


def build_operations(
    request: NormalizedRequest, allowed_formats: Iterable[OutputFormat]
) -> tuple[Operation, ...]:
    operations: list[Operation] = []

    if request.width or request.height:
        operations.append(
            Resize(
                width=request.width,
                height=request.height,
                fit=FitMode.COVER if request.fit == FitMode.CROP else request.fit,
                position=(
                    ResizePosition.CENTRE
                    if request.crop == CropStrategy.CENTER
                    else ResizePosition.ATTENTION
                ),
            )
        )

    if request.background:
        operations.append(Flatten(background=request.background))

    if request.blur:
        operations.append(Blur(sigma=request.blur))

    if request.grayscale:
        operations.append(Grayscale())

    if request.rotate:
        operations.append(Rotate(degrees=request.rotate))

    if request.placeholder == PlaceholderMode.BLUR:
        operations.append(Resize(width=PLACEHOLDER_WIDTH))
        operations.append(Blur(sigma=PLACEHOLDER_BLUR_SIGMA))

    operations.append(
        Encode(
            format=resolve_output_format(request.format, allowed_formats),
            quality=request.quality,
        )
    )
    return tuple(operations)
