# standings_pool/feeds/espn_feed.py
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from standings_pool.config.settings import settings
from .base_feed import BaseFeed, FeedError


class EspnStandingsFeed(BaseFeed):
    """Fetches current NBA standings from the public ESPN site API."""

    source: str = "ESPN"

    def __init__(
        self, url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(client=client)
        self.url = url or settings.espn_standings_url

    async def fetch_standings(self) -> Dict[str, Any]:
        logger.info(f"Fetching standings from {self.source}: {self.url}")
        response = await self._get(self.url)
        try:
            data = response.json()
        except ValueError as e:
            logger.debug(f"Raw standings response content: {response.text[:500]}")
            raise FeedError(f"{self.source} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise FeedError(
                f"{self.source} returned {type(data).__name__}, expected an object"
            )
        logger.success(f"Fetched standings document from {self.source}.")
        return data
