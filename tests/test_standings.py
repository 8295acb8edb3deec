"""Tests for pool-wide scoring and ranking."""

from datetime import datetime, timedelta, timezone

from standings_pool.models.entry import Entry
from standings_pool.models.enums import Conference
from standings_pool.models.wins import WinsTable
from standings_pool.reference.teams import (
    LAST_SEASON_EAST,
    LAST_SEASON_WEST,
    roster_ids,
)
from standings_pool.scoring.standings import (
    alphabetical,
    autofill_last_season,
    latest_entries,
    score_and_sort,
    unknown_team_ids,
)

T0 = datetime(2025, 10, 1, tzinfo=timezone.utc)


def make_entry(name: str, east, west=(), user_id=None, offset_minutes=0) -> Entry:
    return Entry(
        display_name=name,
        east=tuple(east),
        west=tuple(west),
        user_id=user_id,
        submitted_at=T0 + timedelta(minutes=offset_minutes),
    )


def test_score_and_sort_orders_by_points_then_name() -> None:
    wins = WinsTable(wins={"BOS": 60, "NYK": 50})
    entries = [
        make_entry("zed", ["NYK", "BOS"]),  # 50*2 + 60 = 160
        make_entry("Amy", ["NYK", "BOS"]),  # 160
        make_entry("bob", ["BOS", "NYK"]),  # 60*2 + 50 = 170
    ]

    rows = score_and_sort(entries, wins, "weighted")

    assert [(r.rank, r.display_name, r.points) for r in rows] == [
        (1, "bob", 170),
        (2, "Amy", 160),
        (3, "zed", 160),
    ]
    assert rows[0].max_points is None


def test_score_and_sort_distance_mode_reports_max() -> None:
    entry = make_entry("exact", roster_ids(Conference.EAST), roster_ids(Conference.WEST))
    actual = {"east": entry.east, "west": entry.west}

    rows = score_and_sort([entry], {}, "distance", actual=actual)

    assert rows[0].points == 150
    assert rows[0].max_points == 150


def test_score_and_sort_empty_pool() -> None:
    assert score_and_sort([], {}, "weighted") == []


def test_unknown_team_ids() -> None:
    entry = make_entry("someone", ["BOS", "LAL", "XYZ"], ["DEN", "MIA"])
    # LAL is a real team but not in the east
    assert unknown_team_ids(entry) == ["LAL", "XYZ", "MIA"]


def test_latest_entries_supersedes_same_user_and_name() -> None:
    old = make_entry("Sam", ["BOS"], user_id="u1", offset_minutes=0)
    new = make_entry("sam", ["NYK"], user_id="u1", offset_minutes=5)
    other_name = make_entry("Sam's alt", ["MIA"], user_id="u1")
    anonymous = make_entry("Guest", ["ATL"])

    kept = latest_entries([new, old, other_name, anonymous])

    assert old not in kept
    assert {e.id for e in kept} == {new.id, other_name.id, anonymous.id}


def test_latest_entries_keeps_anonymous_duplicates() -> None:
    a = make_entry("Guest", ["ATL"])
    b = make_entry("Guest", ["BOS"], offset_minutes=1)
    assert len(latest_entries([a, b])) == 2


def test_starter_entries() -> None:
    autofill = autofill_last_season("Me", season="2025-26")
    assert autofill.east == LAST_SEASON_EAST
    assert autofill.west == LAST_SEASON_WEST
    assert autofill.season == "2025-26"

    alpha = alphabetical("Me")
    assert alpha.east == roster_ids(Conference.EAST)
    assert list(alpha.west) == sorted(alpha.west)


def test_off_roster_ids_do_not_score_in_pool() -> None:
    entry = make_entry("sneaky", ["OKC"], ["OKC"])

    rows = score_and_sort([entry], {"OKC": 60}, "weighted")

    assert unknown_team_ids(entry) == ["OKC"]
    # Counted once, in its own conference
    assert rows[0].east == 0
    assert rows[0].west == 60
    assert rows[0].points == 60
