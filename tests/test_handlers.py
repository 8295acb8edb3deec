"""Tests for the framework-free API handlers with storage and feed mocked out."""

import asyncio
import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from standings_pool.api import handlers
from standings_pool.models.entry import Entry
from standings_pool.models.wins import WinsTable
from standings_pool.normalization.standings_normalizer import StandingsNormalizer
from standings_pool.reference.teams import EAST_TEAMS, WEST_TEAMS
from standings_pool.storage import supabase_client as storage

UPDATED = datetime(2025, 11, 3, 12, tzinfo=timezone.utc)


@pytest.fixture
def fake_storage(monkeypatch):
    fake = MagicMock()
    fake.fetch_wins_table = AsyncMock(
        return_value=WinsTable(wins={"BOS": 60, "NYK": 50}, last_updated=UPDATED)
    )
    fake.fetch_entries = AsyncMock(return_value=[])
    fake.save_team_wins = AsyncMock(return_value=True)

    monkeypatch.setattr(storage, "get_supabase_client", lambda: object())
    monkeypatch.setattr(storage, "fetch_wins_table", fake.fetch_wins_table)
    monkeypatch.setattr(storage, "fetch_entries", fake.fetch_entries)
    monkeypatch.setattr(storage, "save_team_wins", fake.save_team_wins)
    return fake


def make_feed(document) -> MagicMock:
    feed = MagicMock(source="ESPN")
    feed.fetch_standings = AsyncMock(return_value=document)
    feed.close = AsyncMock()
    return feed


def full_document() -> dict:
    entries = [
        {"team": {"abbreviation": t.id}, "stats": [{"name": "wins", "value": 5}]}
        for t in EAST_TEAMS + WEST_TEAMS
    ]
    return {"children": [{"standings": {"entries": entries}}]}


def test_get_wins(fake_storage) -> None:
    response = asyncio.run(handlers.get_wins())

    assert response["statusCode"] == 200
    assert response["headers"]["cache-control"] == "public, max-age=60"
    assert json.loads(response["body"]) == {
        "wins": {"BOS": 60, "NYK": 50},
        "updatedAt": UPDATED.isoformat(),
    }


def test_get_wins_storage_failure(fake_storage) -> None:
    fake_storage.fetch_wins_table.return_value = None

    response = asyncio.run(handlers.get_wins())

    assert response["statusCode"] == 500
    assert json.loads(response["body"])["ok"] is False
    assert "cache-control" not in response["headers"]


def test_get_standings_ranks_latest_entries(fake_storage) -> None:
    older = Entry(
        display_name="Sam",
        user_id="u1",
        east=("NYK", "BOS"),
        submitted_at=datetime(2025, 10, 1, tzinfo=timezone.utc),
    )
    newer = Entry(
        display_name="Sam",
        user_id="u1",
        east=("BOS", "NYK"),
        submitted_at=datetime(2025, 10, 2, tzinfo=timezone.utc),
    )
    rival = Entry(display_name="Alex", east=("NYK", "BOS"))
    fake_storage.fetch_entries.return_value = [older, newer, rival]

    response = asyncio.run(handlers.get_standings("weighted"))
    body = json.loads(response["body"])

    assert response["statusCode"] == 200
    assert body["mode"] == "weighted"
    assert body["lastUpdated"] == UPDATED.isoformat()
    assert [(r["rank"], r["name"], r["points"]) for r in body["standings"]] == [
        (1, "Sam", 170),
        (2, "Alex", 160),
    ]


def test_get_standings_rejects_unknown_mode(fake_storage) -> None:
    response = asyncio.run(handlers.get_standings("fantasy"))
    assert response["statusCode"] == 400


def test_get_standings_defaults_to_configured_mode(fake_storage) -> None:
    response = asyncio.run(handlers.get_standings())
    assert json.loads(response["body"])["mode"] == handlers.settings.scoring_mode


def test_update_wins_saves_rows(fake_storage) -> None:
    feed = make_feed(full_document())

    response = asyncio.run(handlers.update_wins(feed=feed))
    body = json.loads(response["body"])

    assert response["statusCode"] == 200
    assert body["ok"] is True
    assert body["updated"] == 30
    rows = fake_storage.save_team_wins.call_args.args[0]
    assert len(rows) == 30
    feed.close.assert_awaited_once()


def test_update_wins_keeps_old_values_when_feed_is_short(fake_storage) -> None:
    document = {"standings": {"entries": full_document()["children"][0]["standings"]["entries"][:10]}}
    feed = make_feed(document)

    response = asyncio.run(
        handlers.update_wins(feed=feed, normalizer=StandingsNormalizer(min_rows=26))
    )
    body = json.loads(response["body"])

    assert response["statusCode"] == 502
    assert body == {"ok": False, "reason": "Too few rows from ESPN", "count": 10}
    fake_storage.save_team_wins.assert_not_called()


def test_update_wins_save_failure(fake_storage) -> None:
    fake_storage.save_team_wins.return_value = False

    response = asyncio.run(handlers.update_wins(feed=make_feed(full_document())))

    assert response["statusCode"] == 500


def test_missing_configuration_is_a_500(monkeypatch) -> None:
    monkeypatch.setattr(storage, "get_supabase_client", lambda: None)
    monkeypatch.setattr(
        storage, "initialize_supabase", AsyncMock(side_effect=SystemExit("missing"))
    )

    response = asyncio.run(handlers.get_wins())

    assert response["statusCode"] == 500
    assert json.loads(response["body"])["error"] == "missing"
