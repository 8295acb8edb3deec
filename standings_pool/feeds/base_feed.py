from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
from loguru import logger
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from standings_pool.config.settings import settings

# Statuses worth another attempt
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


class FeedError(Exception):
    """Custom exception for standings feed errors."""

    pass


class RateLimitError(FeedError):
    """Exception raised for rate limit errors (429)."""

    pass


class BaseFeed(ABC):
    """Abstract base class for standings feeds."""

    source: str = "unknown"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.feed_timeout_seconds),
            follow_redirects=True,
            headers={"User-Agent": settings.feed_user_agent},
        )

    @abstractmethod
    async def fetch_standings(self) -> Dict[str, Any]:
        """Fetch the raw standings document from the feed.

        Returns:
            The decoded JSON body, untouched. Normalization happens elsewhere.
        """
        pass

    @retry(
        stop=stop_after_attempt(4),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(
            (httpx.RequestError, httpx.HTTPStatusError, RateLimitError)
        ),
        reraise=True,
    )
    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """GET with retries on transport errors, 429 and transient 5xx."""
        logger.debug(f"GET {url} for {self.source}", params=params)
        try:
            response = await self.client.get(url, params=params)
            if response.status_code == 429:
                logger.warning(
                    f"{self.source} throttled us, Retry-After: {response.headers.get('Retry-After')}"
                )
                raise RateLimitError(f"Rate limited by {self.source}")
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in RETRYABLE_STATUS_CODES:
                logger.warning(f"{self.source} returned {status}, retrying")
                raise
            logger.error(f"{self.source} fetch failed with status {status}")
            raise FeedError(f"{self.source} fetch failed: {status}") from e
        except httpx.RequestError as e:
            logger.warning(f"Transport error talking to {self.source}: {e}")
            raise

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.info(f"Closed HTTP client for {self.source}")
