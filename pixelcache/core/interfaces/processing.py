"""
Source Fetch and Transform Engine Protocols

The orchestrator talks to the network and to the image library only through
these two seams, so unit tests can substitute fakes for either.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from pixelcache.models.operations import EngineOutput, FetchedImage, Operation


@runtime_checkable
class ImageFetcher(Protocol):
    """
    Retrieves source image bytes from a URL.

    Implementations:
    - HttpImageFetcher: httpx client with bounded retry

    Raises:
        SourceFetchError: When the source cannot be retrieved
    """

    async def fetch(self, url: str) -> FetchedImage:
        ...


@runtime_checkable
class TransformEngine(Protocol):
    """
    Decodes, transforms and re-encodes an image.

    Operations are applied strictly in the order given.

    Implementations:
    - PillowTransformEngine: Pillow, executed off the event loop

    Raises:
        TransformEngineError: On undecodable input or failed encode
    """

    async def transform(self, data: bytes, operations: Sequence[Operation]) -> EngineOutput:
        ...
