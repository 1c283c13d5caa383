"""
Image operations and collaborator payloads.

The orchestrator describes a transformation as an ordered tuple of these
operations; the image engine executes them in order and knows nothing about
requests, caching or configuration.
"""

from dataclasses import dataclass, field

from pixelcache.core.config.constants import FitMode, OutputFormat


class ResizePosition:
    """Anchor for cover crops."""

    CENTRE = "centre"
    ATTENTION = "attention"


@dataclass(frozen=True)
class Resize:
    """
    Resize into a target box.

    With only one dimension given the other follows the aspect ratio,
    whatever the fit mode.
    """

    width: int | None = None
    height: int | None = None
    fit: FitMode = FitMode.COVER
    position: str = ResizePosition.CENTRE


@dataclass(frozen=True)
class Flatten:
    """Composite transparency onto a solid background colour."""

    background: str


@dataclass(frozen=True)
class Blur:
    """Gaussian blur with the given sigma."""

    sigma: float


@dataclass(frozen=True)
class Grayscale:
    """Drop colour information."""


@dataclass(frozen=True)
class Rotate:
    """Rotate clockwise by the given number of degrees."""

    degrees: float


@dataclass(frozen=True)
class Encode:
    """
    Final encode step.

    format=None keeps the source's own format.
    """

    format: OutputFormat | None = None
    quality: int = 80


Operation = Resize | Flatten | Blur | Grayscale | Rotate | Encode


@dataclass(frozen=True)
class EngineOutput:
    """What the image engine hands back."""

    data: bytes = field(repr=False)
    format: str | None
    width: int
    height: int


@dataclass(frozen=True)
class FetchedImage:
    """What the fetcher hands back."""

    data: bytes = field(repr=False)
    content_type: str | None = None
