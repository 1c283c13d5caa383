"""
Pillow Transform Engine

Executes an ordered operation list against an image using Pillow.

STAGE-5: Transform

Pillow is synchronous and CPU bound, so every transform runs in a worker
thread via asyncio.to_thread(); the event loop keeps serving other requests
while images are decoded and encoded.

Fit semantics (both dimensions given):
- cover: scale to cover the box, then crop the overflow (centre or attention)
- contain: scale to fit inside the box, pad the rest (transparent or black)
- fill: stretch to exactly the box
- inside: scale to fit inside the box, no padding
- outside: scale to cover the box, no cropping
With only one dimension given the other follows the aspect ratio.
"""

import asyncio
import math
from collections.abc import Sequence
from io import BytesIO

from PIL import Image, ImageColor, ImageFile, ImageFilter, ImageOps, UnidentifiedImageError

from pixelcache.core.config.constants import FitMode, OutputFormat, Stage
from pixelcache.core.exceptions import TransformEngineError
from pixelcache.core.logging import get_logger, log_stage
from pixelcache.models.operations import (
    Blur,
    Encode,
    EngineOutput,
    Flatten,
    Grayscale,
    Operation,
    Resize,
    ResizePosition,
    Rotate,
)

logger = get_logger(__name__)

# Decode truncated sources best-effort instead of failing
ImageFile.LOAD_TRUNCATED_IMAGES = True

# OutputFormat -> Pillow encoder name
PILLOW_FORMATS: dict[OutputFormat, str] = {
    OutputFormat.WEBP: "WEBP",
    OutputFormat.AVIF: "AVIF",
    OutputFormat.JPEG: "JPEG",
    OutputFormat.PNG: "PNG",
}

FALLBACK_FORMAT = "PNG"

# Candidate windows per axis when searching for the busiest crop
ATTENTION_STEPS = 9


def has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or (
        img.mode == "P" and "transparency" in img.info
    )


WORKING_MODES = ("L", "LA", "RGB", "RGBA")
SIXTEEN_BIT_MODES = ("I", "I;16", "I;16B", "I;16L", "I;16N")


def to_working_mode(img: Image.Image) -> Image.Image:
    """
    Bring a decoded image into L, LA, RGB or RGBA.

    Gaussian blur and some encoders reject other modes (1-bit, 16-bit, float).
    """
    if img.mode in WORKING_MODES:
        return img
    if img.mode in SIXTEEN_BIT_MODES:
        # 16-bit samples scaled down to 8 bits
        return img.convert("I").point(lambda v: v * (1 / 256)).convert("L")
    if img.mode in ("1", "F"):
        return img.convert("L")
    return img.convert("RGBA" if has_alpha(img) else "RGB")


def _target_size(img: Image.Image, op: Resize) -> tuple[int, int]:
    """Box for a resize where one side may be missing."""
    src_w, src_h = img.size
    if op.width and op.height:
        return op.width, op.height
    if op.width:
        return op.width, max(1, round(src_h * op.width / src_w))
    return max(1, round(src_w * op.height / src_h)), op.height


def _scale(img: Image.Image, factor: float) -> Image.Image:
    src_w, src_h = img.size
    size = (max(1, round(src_w * factor)), max(1, round(src_h * factor)))
    return img.resize(size, Image.Resampling.LANCZOS)


def _attention_crop(img: Image.Image, width: int, height: int) -> Image.Image:
    """
    Crop a width x height window from an image that already covers it,
    picking the window with the highest entropy.
    """
    src_w, src_h = img.size
    spare_x, spare_y = src_w - width, src_h - height

    best_box = None
    best_score = -1.0
    for step in range(ATTENTION_STEPS):
        left = round(spare_x * step / (ATTENTION_STEPS - 1))
        top = round(spare_y * step / (ATTENTION_STEPS - 1))
        box = (left, top, left + width, top + height)
        score = img.crop(box).entropy()
        if score > best_score:
            best_box, best_score = box, score
        if spare_x == 0 and spare_y == 0:
            break

    return img.crop(best_box)


def apply_resize(img: Image.Image, op: Resize) -> Image.Image:
    if not op.width and not op.height:
        return img

    width, height = _target_size(img, op)
    src_w, src_h = img.size

    # Single-dimension requests keep the aspect ratio whatever the fit
    if not (op.width and op.height) or op.fit == FitMode.FILL:
        return img.resize((width, height), Image.Resampling.LANCZOS)

    fit = FitMode.COVER if op.fit == FitMode.CROP else op.fit

    if fit == FitMode.INSIDE:
        return _scale(img, min(width / src_w, height / src_h))

    if fit == FitMode.OUTSIDE:
        return _scale(img, max(width / src_w, height / src_h))

    if fit == FitMode.CONTAIN:
        if has_alpha(img):
            img = img.convert("RGBA")
            color = (0, 0, 0, 0)
        else:
            img = img.convert("RGB")
            color = (0, 0, 0)
        return ImageOps.pad(img, (width, height), Image.Resampling.LANCZOS, color=color)

    # cover
    if op.position == ResizePosition.ATTENTION:
        factor = max(width / src_w, height / src_h)
        covered = img.resize(
            (max(width, math.ceil(src_w * factor)), max(height, math.ceil(src_h * factor))),
            Image.Resampling.LANCZOS,
        )
        return _attention_crop(covered, width, height)

    return ImageOps.fit(img, (width, height), Image.Resampling.LANCZOS, centering=(0.5, 0.5))


def apply_flatten(img: Image.Image, op: Flatten) -> Image.Image:
    background = ImageColor.getrgb(op.background)[:3]
    if not has_alpha(img):
        return img.convert("RGB")

    rgba = img.convert("RGBA")
    canvas = Image.new("RGBA", rgba.size, background + (255,))
    return Image.alpha_composite(canvas, rgba).convert("RGB")


def apply_blur(img: Image.Image, op: Blur) -> Image.Image:
    img = to_working_mode(img)
    return img.filter(ImageFilter.GaussianBlur(radius=op.sigma))


def apply_grayscale(img: Image.Image, op: Grayscale) -> Image.Image:
    return img.convert("LA" if has_alpha(img) else "L")


def apply_rotate(img: Image.Image, op: Rotate) -> Image.Image:
    img = to_working_mode(img)
    # Pillow rotates counter-clockwise; positive degrees mean clockwise here
    return img.rotate(-op.degrees, resample=Image.Resampling.BICUBIC, expand=True)


def encode(img: Image.Image, op: Encode, source_format: str | None) -> tuple[bytes, str]:
    """
    Encode img.

    Returns:
        (data, format) where format is the lower-case encoder name used
    """
    if op.format is not None:
        pil_format = PILLOW_FORMATS[op.format]
    else:
        pil_format = source_format or FALLBACK_FORMAT

    params: dict = {}
    if pil_format == "JPEG":
        if img.mode not in ("RGB", "L", "CMYK"):
            img = img.convert("RGB")
        params = {"quality": op.quality}
    elif pil_format in ("WEBP", "AVIF"):
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA" if has_alpha(img) else "RGB")
        params = {"quality": op.quality}
    elif pil_format == "PNG":
        params = {"optimize": True}

    buffer = BytesIO()
    try:
        img.save(buffer, format=pil_format, **params)
    except (KeyError, OSError, ValueError) as e:
        # Unknown encoder or mode this encoder cannot write
        if op.format is not None or pil_format == FALLBACK_FORMAT:
            raise TransformEngineError.from_exception(
                e, f"Cannot encode image as {pil_format}", format=pil_format
            ) from e
        return encode(img, Encode(format=OutputFormat.PNG, quality=op.quality), None)

    return buffer.getvalue(), pil_format.lower()


class PillowTransformEngine:
    """
    Transform engine backed by Pillow.

    Usage:
        engine = PillowTransformEngine()
        output = await engine.transform(png_bytes, [Resize(width=300), Encode(OutputFormat.WEBP)])
    """

    _handlers = {
        Resize: apply_resize,
        Flatten: apply_flatten,
        Blur: apply_blur,
        Grayscale: apply_grayscale,
        Rotate: apply_rotate,
    }

    async def transform(self, data: bytes, operations: Sequence[Operation]) -> EngineOutput:
        output = await asyncio.to_thread(self.transform_sync, data, operations)
        log_stage(
            logger,
            Stage.TRANSFORM,
            "Image transformed",
            format=output.format,
            width=output.width,
            height=output.height,
            bytes=len(output.data),
        )
        return output

    def transform_sync(self, data: bytes, operations: Sequence[Operation]) -> EngineOutput:
        """
        Decode, apply operations in order, encode.

        Raises:
            TransformEngineError: If the input cannot be decoded or encoded
        """
        try:
            img = Image.open(BytesIO(data))
            img.load()
            source_format = img.format
            img = to_working_mode(img)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise TransformEngineError.from_exception(
                e, "Input buffer contains unsupported image format", bytes=len(data)
            ) from e

        encode_op = Encode()

        for op in operations:
            if isinstance(op, Encode):
                encode_op = op
                continue
            handler = self._handlers.get(type(op))
            if handler is None:
                raise TransformEngineError(
                    f"Unsupported operation: {type(op).__name__}",
                    details={"operation": repr(op)},
                )
            try:
                img = handler(img, op)
            except (ValueError, OSError) as e:
                raise TransformEngineError.from_exception(
                    e, f"Cannot apply {type(op).__name__}", operation=repr(op)
                ) from e

        encoded, fmt = encode(img, encode_op, source_format)
        return EngineOutput(data=encoded, format=fmt, width=img.width, height=img.height)
