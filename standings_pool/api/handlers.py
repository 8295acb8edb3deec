# standings_pool/api/handlers.py
"""Framework-free request handlers for the public wins/standings endpoints.

Each handler returns a ``{"statusCode", "headers", "body"}`` dict with a JSON
string body, so it can be mounted behind any serverless or ASGI adapter.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from loguru import logger

from standings_pool.config.settings import settings
from standings_pool.feeds.base_feed import BaseFeed
from standings_pool.feeds.espn_feed import EspnStandingsFeed
from standings_pool.normalization.standings_normalizer import (
    IncompleteStandingsError,
    StandingsNormalizer,
)
from standings_pool.scoring.engine import InvalidInputError, coerce_mode
from standings_pool.scoring.standings import latest_entries, score_and_sort
from standings_pool.storage import supabase_client as storage

Response = Dict[str, Any]


class StorageUnavailableError(Exception):
    """Raised when a storage read returns nothing usable."""

    pass


def _response(
    status_code: int, payload: Dict[str, Any], cacheable: bool = False
) -> Response:
    headers = {"content-type": "application/json"}
    if cacheable:
        headers["cache-control"] = f"public, max-age={settings.cache_max_age_seconds}"
    return {"statusCode": status_code, "headers": headers, "body": json.dumps(payload)}


def _error(status_code: int, message: str) -> Response:
    return _response(status_code, {"ok": False, "error": message})


async def _ensure_client() -> None:
    if storage.get_supabase_client() is not None:
        return
    try:
        client = await storage.initialize_supabase()
    except SystemExit as e:
        raise StorageUnavailableError(str(e)) from e
    if client is None:
        raise StorageUnavailableError("Supabase client could not be initialized")


async def get_wins() -> Response:
    """GET /wins -> {wins, updatedAt}"""
    try:
        await _ensure_client()
        table = await storage.fetch_wins_table()
        if table is None:
            raise StorageUnavailableError("Failed to read team wins")
        return _response(200, table.to_payload(), cacheable=True)
    except Exception as e:
        logger.exception(f"get_wins failed: {e}")
        return _error(500, str(e))


async def get_standings(mode: Optional[str] = None) -> Response:
    """GET /standings -> {lastUpdated, mode, standings}"""
    try:
        scoring_mode = coerce_mode(mode or settings.scoring_mode)
    except InvalidInputError as e:
        return _error(400, str(e))

    try:
        await _ensure_client()
        table = await storage.fetch_wins_table()
        entries = await storage.fetch_entries(settings.season)
        if table is None or entries is None:
            raise StorageUnavailableError("Failed to read wins or entries")

        rows = score_and_sort(latest_entries(entries), table, scoring_mode)
        payload = {
            "lastUpdated": table.last_updated.isoformat(),
            "mode": scoring_mode.value,
            "standings": [row.to_payload() for row in rows],
        }
        return _response(200, payload, cacheable=True)
    except Exception as e:
        logger.exception(f"get_standings failed: {e}")
        return _error(500, str(e))


async def update_wins(
    feed: Optional[BaseFeed] = None,
    normalizer: Optional[StandingsNormalizer] = None,
) -> Response:
    """Scheduled job: pull the feed, normalize, and persist current wins."""
    feed = feed or EspnStandingsFeed()
    normalizer = normalizer or StandingsNormalizer()
    try:
        await _ensure_client()
        raw = await feed.fetch_standings()
        rows = normalizer.normalize(raw)

        now = datetime.now(timezone.utc)
        if not await storage.save_team_wins(rows, as_of=now):
            raise StorageUnavailableError("Failed to save team wins")

        logger.success(f"Updated wins for {len(rows)} teams.")
        return _response(
            200, {"ok": True, "updated": len(rows), "at": now.isoformat()}
        )
    except IncompleteStandingsError as e:
        logger.warning(f"Keeping stored wins: {e}")
        return _response(
            502, {"ok": False, "reason": f"Too few rows from {feed.source}", "count": e.count}
        )
    except Exception as e:
        logger.exception(f"update_wins failed: {e}")
        return _error(500, str(e))
    finally:
        await feed.close()
