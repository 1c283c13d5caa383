"""
Request Test Factory

Builds raw parameter bags and normalized requests for tests.
"""

from typing import Any

from pixelcache.core.config.settings import OptimizerConfig
from pixelcache.models.transform import NormalizedRequest
from pixelcache.optimizer.normalizer import RequestNormalizer

SOURCE_URL = "https://cdn.example.com/photos/cat.png"


class RequestTestFactory:
    """Factory for creating transform requests."""

    @staticmethod
    def raw(**overrides: Any) -> dict[str, Any]:
        params: dict[str, Any] = {"url": SOURCE_URL}
        params.update(overrides)
        return params

    @staticmethod
    def query(**overrides: str) -> dict[str, str]:
        """Query-string style bag: every value is a string."""
        params = {"url": SOURCE_URL, "w": "300", "format": "webp"}
        params.update(overrides)
        return params

    @staticmethod
    def normalized(config: OptimizerConfig | None = None, buffer: bytes | None = None, **raw) -> NormalizedRequest:
        if buffer is None:
            raw.setdefault("url", SOURCE_URL)
        return RequestNormalizer(config or OptimizerConfig()).normalize(raw, buffer=buffer)
