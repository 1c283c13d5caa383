"""
HTTP Source Fetcher

Downloads source images with httpx and retries transient failures with
tenacity.

STAGE-4: Source fetch

Retry Strategy:
- Transport errors (connect/read failures, timeouts) are retried
- Responses with a status in FETCH_RETRYABLE_STATUS_CODES are retried
- Any other non-2xx status fails immediately
- Exponential backoff with jitter between attempts
- After retry_limit extra attempts the last failure becomes SourceFetchError
"""

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from pixelcache.core.config.constants import (
    FETCH_RETRY_BASE_DELAY,
    FETCH_RETRY_LIMIT,
    FETCH_RETRY_MAX_DELAY,
    FETCH_RETRYABLE_STATUS_CODES,
    FETCH_TIMEOUT,
    Stage,
)
from pixelcache.core.exceptions import SourceFetchError
from pixelcache.core.logging import get_logger, log_stage
from pixelcache.models.operations import FetchedImage

logger = get_logger(__name__)


class RetryableStatusError(Exception):
    """Upstream answered with a status worth retrying."""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Upstream returned {status_code}")


class HttpImageFetcher:
    """
    Fetches source images over HTTP(S).

    A new AsyncClient is opened per fetch so the fetcher holds no connection
    state between requests. Pass transport= to route requests elsewhere
    (httpx.MockTransport in tests).
    """

    def __init__(
        self,
        timeout: float = FETCH_TIMEOUT,
        retry_limit: int = FETCH_RETRY_LIMIT,
        retry_base_delay: float = FETCH_RETRY_BASE_DELAY,
        retry_max_delay: float = FETCH_RETRY_MAX_DELAY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if retry_limit < 0:
            raise ValueError("retry_limit must not be negative")

        self._timeout = timeout
        self._retry_limit = retry_limit
        self._retry_base_delay = retry_base_delay
        self._retry_max_delay = retry_max_delay
        self._transport = transport

    @property
    def max_attempts(self) -> int:
        return self._retry_limit + 1

    async def fetch(self, url: str) -> FetchedImage:
        """
        Download url.

        Raises:
            SourceFetchError: On a non-retryable status or once retries run out
        """
        log_stage(logger, Stage.SOURCE_FETCH, "Fetching source", url=url)

        @retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                initial=self._retry_base_delay, max=self._retry_max_delay
            ),
            retry=retry_if_exception_type((httpx.TransportError, RetryableStatusError)),
            before_sleep=lambda retry_state: log_stage(
                logger,
                Stage.RETRY,
                "Retrying source fetch",
                level="warning",
                url=url,
                attempt=retry_state.attempt_number,
                delay=round(retry_state.idle_for, 3),
                error=str(retry_state.outcome.exception()),
            ),
            reraise=True,
        )
        async def _fetch_with_retry() -> FetchedImage:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport, follow_redirects=True
            ) as client:
                response = await client.get(url)

            if response.status_code in FETCH_RETRYABLE_STATUS_CODES:
                raise RetryableStatusError(response.status_code, url)
            if response.is_error:
                raise SourceFetchError(
                    f"Source fetch failed with status {response.status_code}",
                    details={"url": url, "status_code": response.status_code},
                )

            return FetchedImage(
                data=response.content,
                content_type=response.headers.get("content-type"),
            )

        try:
            image = await _fetch_with_retry()
        except RetryableStatusError as e:
            raise SourceFetchError(
                f"Source fetch failed with status {e.status_code}",
                details={"url": url, "status_code": e.status_code, "attempts": self.max_attempts},
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise SourceFetchError.from_exception(
                e, f"Source fetch failed: {e.__class__.__name__}", url=url
            ) from e

        log_stage(
            logger,
            Stage.SOURCE_FETCH,
            "Source fetched",
            url=url,
            bytes=len(image.data),
            content_type=image.content_type,
        )
        return image
