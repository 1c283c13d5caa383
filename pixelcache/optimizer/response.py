"""
Response Materializer

Turns a TransformResult into status, headers and body for an HTTP method
and an optional If-None-Match validator.

STAGE-7: Respond
"""

from dataclasses import dataclass, field

from pixelcache.models.transform import TransformResult


@dataclass(frozen=True)
class ImageResponse:
    """Framework-neutral HTTP response."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = field(default=b"", repr=False)


def cache_control_for(ttl: int | None) -> str:
    if ttl:
        return f"public, max-age={ttl}, s-maxage={ttl}"
    return "public, max-age=0"


class ResponseMaterializer:
    """
    Builds responses for image results.

    Args:
        ttl: Cache TTL advertised to clients and shared caches (None = 0)
    """

    def __init__(self, ttl: int | None = None):
        self._ttl = ttl
        self._cache_control = cache_control_for(ttl)

    @property
    def cache_control(self) -> str:
        return self._cache_control

    def build_headers(self, result: TransformResult) -> dict[str, str]:
        return {
            "Content-Type": result.content_type,
            "ETag": result.etag,
            "Cache-Control": self._cache_control,
        }

    @staticmethod
    def is_not_modified(result: TransformResult, if_none_match: str | None) -> bool:
        """Exact match only; lists and weak comparison are not interpreted."""
        return if_none_match is not None and if_none_match == result.etag

    def materialize(
        self, result: TransformResult, method: str, if_none_match: str | None = None
    ) -> ImageResponse:
        """
        HEAD -> 200, headers only
        GET with matching If-None-Match -> 304, ETag and Cache-Control only
        GET -> 200 with body
        """
        if method.upper() == "HEAD":
            return ImageResponse(status=200, headers=self.build_headers(result))

        if self.is_not_modified(result, if_none_match):
            return ImageResponse(
                status=304,
                headers={"ETag": result.etag, "Cache-Control": self._cache_control},
            )

        return ImageResponse(status=200, headers=self.build_headers(result), body=result.data)
