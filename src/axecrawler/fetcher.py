"""Page fetching for the crawl phase."""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from axecrawler.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    EXPONENTIAL_BACKOFF_BASE,
    INITIAL_BACKOFF_DELAY_SECONDS,
    MAX_BACKOFF_DELAY_SECONDS,
)
from axecrawler.errors import FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """A fetched page."""
    url: str
    status: int
    body: str = ""
    final_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class PageFetcher(Protocol):
    """Anything that can retrieve a page for the crawler.

    Implementations report a failed fetch by raising FetchError rather
    than crashing the round.
    """

    async def fetch(self, url: str) -> FetchResult:
        ...


class HttpFetcher:
    """Fetches pages over HTTP with httpx, retrying transient failures."""

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            max_retries: Retries for transport errors and 5xx responses
            client: Optional preconfigured client (closed by the caller)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_retries = max_retries
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            },
        )

    async def __aenter__(self) -> "HttpFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _calculate_backoff_delay(self, retry_count: int) -> float:
        """Calculate exponential backoff delay with jitter.

        Args:
            retry_count: Number of retries already attempted (0-indexed)

        Returns:
            Delay in seconds before next retry
        """
        delay = INITIAL_BACKOFF_DELAY_SECONDS * (EXPONENTIAL_BACKOFF_BASE ** retry_count)
        delay = min(delay, MAX_BACKOFF_DELAY_SECONDS)
        # ±25% jitter
        jitter = delay * random.uniform(-0.25, 0.25)
        return delay + jitter

    async def fetch(self, url: str) -> FetchResult:
        """Fetch a URL, following redirects.

        Args:
            url: Absolute URL to fetch

        Returns:
            FetchResult for a 2xx response

        Raises:
            FetchError: On network errors, timeouts or a non-2xx final status
        """
        last_error: Optional[FetchError] = None

        for attempt in range(self.max_retries + 1):
            if attempt > 0:
                delay = self._calculate_backoff_delay(attempt - 1)
                logger.debug(f"Retrying ({attempt}/{self.max_retries}) after {delay:.1f}s: {url}")
                await asyncio.sleep(delay)

            try:
                response = await self._client.get(url)
            except (httpx.InvalidURL, httpx.StreamError) as e:
                raise FetchError(url, f"Request could not be made ({type(e).__name__}: {e})") from e
            except httpx.TimeoutException:
                last_error = FetchError(url, f"Request timeout after {self.timeout}s")
                continue
            except httpx.HTTPError as e:
                last_error = FetchError(url, f"Request failed ({type(e).__name__}: {e})")
                continue

            if response.status_code >= 500:
                last_error = FetchError(
                    url, f"Server error {response.status_code}", response.status_code
                )
                continue

            if not response.is_success:
                raise FetchError(
                    url, f"Website returned an error {response.status_code}", response.status_code
                )

            return FetchResult(
                url=url,
                status=response.status_code,
                body=response.text,
                final_url=str(response.url),
            )

        raise last_error
