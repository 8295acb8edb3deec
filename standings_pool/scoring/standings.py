# standings_pool/scoring/standings.py
from typing import Dict, Iterable, List, Optional, Tuple, Union

from loguru import logger

from standings_pool.models.entry import Entry
from standings_pool.models.enums import Conference, ScoringMode
from standings_pool.models.score import StandingRow
from standings_pool.reference.teams import LAST_SEASON_EAST, LAST_SEASON_WEST, roster_ids
from .engine import EntryLike, WinsLike, compute_score


def unknown_team_ids(entry: Entry) -> List[str]:
    """Ids in an entry that are not on the canonical roster of their conference."""
    unknown: List[str] = []
    for conference in Conference:
        roster = set(roster_ids(conference))
        unknown.extend(t for t in entry.ranked_list(conference) if t not in roster)
    return unknown


def latest_entries(entries: Iterable[Entry]) -> List[Entry]:
    """Drops entries superseded by a newer submission.

    An entry is superseded by a later one from the same user under the same
    display name (compared case-insensitively). Entries without a user_id are
    anonymous and always kept.
    """
    latest: Dict[Tuple[str, str], Entry] = {}
    kept: List[Entry] = []
    for entry in entries:
        if entry.user_id is None:
            kept.append(entry)
            continue
        key = (entry.user_id, entry.display_name.casefold())
        current = latest.get(key)
        if current is None or entry.submitted_at > current.submitted_at:
            latest[key] = entry
    return kept + list(latest.values())


def score_and_sort(
    entries: Iterable[Entry],
    wins: WinsLike,
    mode: Union[ScoringMode, str],
    actual: Optional[EntryLike] = None,
) -> List[StandingRow]:
    """Scores every entry and ranks them: points desc, then display name asc."""
    scored = []
    for entry in entries:
        unknown = unknown_team_ids(entry)
        if unknown:
            logger.warning(
                f"Entry {entry.id} ({entry.display_name}) has unknown team ids {unknown}; they score 0."
            )
        result = compute_score(entry, wins, mode, actual)
        scored.append((entry, result))

    scored.sort(key=lambda pair: (-pair[1].total, pair[0].display_name.casefold()))
    logger.debug(f"Scored and ranked {len(scored)} entries ({mode}).")

    return [
        StandingRow(
            rank=index + 1,
            entry_id=entry.id,
            display_name=entry.display_name,
            user_id=entry.user_id,
            points=result.total,
            east=result.east,
            west=result.west,
            max_points=result.max_total,
            submitted_at=entry.submitted_at,
        )
        for index, (entry, result) in enumerate(scored)
    ]


def autofill_last_season(display_name: str, **kwargs) -> Entry:
    """Starter entry pre-filled with last season's finishing order."""
    return Entry.new(display_name, LAST_SEASON_EAST, LAST_SEASON_WEST, **kwargs)


def alphabetical(display_name: str, **kwargs) -> Entry:
    """Starter entry with both conferences in roster order (by team name)."""
    return Entry.new(
        display_name,
        roster_ids(Conference.EAST),
        roster_ids(Conference.WEST),
        **kwargs,
    )
