from pixelcache.models.operations import (
    Blur,
    Encode,
    EngineOutput,
    FetchedImage,
    Flatten,
    Grayscale,
    Operation,
    Resize,
    ResizePosition,
    Rotate,
)
from pixelcache.models.transform import NormalizedRequest, TransformParams, TransformResult

__all__ = [
    "TransformParams",
    "NormalizedRequest",
    "TransformResult",
    "Operation",
    "Resize",
    "ResizePosition",
    "Flatten",
    "Blur",
    "Grayscale",
    "Rotate",
    "Encode",
    "EngineOutput",
    "FetchedImage",
]
