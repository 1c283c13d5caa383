"""
Unit Tests for the HTTP source fetcher.

Requests are served by httpx.MockTransport; retry delays are set to zero.
"""

import httpx
import pytest

from pixelcache.core.exceptions import SourceFetchError
from pixelcache.core.interfaces import ImageFetcher
from pixelcache.infrastructure.fetch import HttpImageFetcher

URL = "https://cdn.example.com/a.png"


def make_fetcher(handler, retry_limit: int = 2) -> HttpImageFetcher:
    return HttpImageFetcher(
        timeout=1.0,
        retry_limit=retry_limit,
        retry_base_delay=0,
        retry_max_delay=0,
        transport=httpx.MockTransport(handler),
    )


class ScriptedHandler:
    """Replays a list of responses/exceptions, one per request."""

    def __init__(self, *steps):
        self.steps = list(steps)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps.pop(0) if len(self.steps) > 1 else self.steps[0]
        if isinstance(step, Exception):
            raise step
        return step


@pytest.mark.unit
class TestHttpImageFetcherSuccess:
    def test_satisfies_protocol(self):
        assert isinstance(HttpImageFetcher(), ImageFetcher)

    def test_rejects_negative_retry_limit(self):
        with pytest.raises(ValueError):
            HttpImageFetcher(retry_limit=-1)

    async def test_returns_body_and_content_type(self, red_png):
        handler = ScriptedHandler(
            httpx.Response(200, content=red_png, headers={"content-type": "image/png"})
        )
        image = await make_fetcher(handler).fetch(URL)

        assert image.data == red_png
        assert image.content_type == "image/png"
        assert str(handler.requests[0].url) == URL


@pytest.mark.unit
class TestHttpImageFetcherRetry:
    async def test_retries_retryable_status_then_succeeds(self, red_png):
        handler = ScriptedHandler(
            httpx.Response(503),
            httpx.Response(502),
            httpx.Response(200, content=red_png),
        )
        image = await make_fetcher(handler, retry_limit=2).fetch(URL)

        assert image.data == red_png
        assert len(handler.requests) == 3

    async def test_retries_transport_errors(self, red_png):
        handler = ScriptedHandler(
            httpx.ConnectError("connection refused"),
            httpx.Response(200, content=red_png),
        )
        image = await make_fetcher(handler).fetch(URL)

        assert image.data == red_png
        assert len(handler.requests) == 2

    async def test_gives_up_after_retry_limit(self):
        handler = ScriptedHandler(httpx.Response(500))

        with pytest.raises(SourceFetchError) as exc_info:
            await make_fetcher(handler, retry_limit=2).fetch(URL)

        assert len(handler.requests) == 3
        assert exc_info.value.details["status_code"] == 500
        assert exc_info.value.status_code == 500

    async def test_transport_errors_exhaust_into_source_fetch_error(self):
        handler = ScriptedHandler(httpx.ConnectTimeout("timed out"))

        with pytest.raises(SourceFetchError) as exc_info:
            await make_fetcher(handler, retry_limit=1).fetch(URL)

        assert len(handler.requests) == 2
        assert exc_info.value.details["original_error"] == "ConnectTimeout"

    async def test_zero_retry_limit_means_single_attempt(self):
        handler = ScriptedHandler(httpx.Response(503))

        with pytest.raises(SourceFetchError):
            await make_fetcher(handler, retry_limit=0).fetch(URL)

        assert len(handler.requests) == 1

    @pytest.mark.parametrize("status", [400, 401, 403, 404])
    async def test_client_errors_fail_immediately(self, status):
        handler = ScriptedHandler(httpx.Response(status))

        with pytest.raises(SourceFetchError) as exc_info:
            await make_fetcher(handler).fetch(URL)

        assert len(handler.requests) == 1
        assert exc_info.value.details["status_code"] == status
