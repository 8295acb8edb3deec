# standings_pool/scoring/engine.py
"""Pure scoring of pool entries against a wins snapshot.

Nothing in this module performs I/O, logs, or mutates its arguments: the same
inputs always yield an equal ScoreResult, so historical scores can be
recomputed whenever the wins table changes.
"""

import math
import numbers
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from standings_pool.models.entry import Entry
from standings_pool.models.enums import Conference, ScoringMode
from standings_pool.models.score import PerTeamDetail, ScoreResult
from standings_pool.models.wins import WinsTable
from standings_pool.reference.teams import roster_ids

# Rank-distance points: exact = 5, off by one = 3, off by two = 1, else 0
DISTANCE_POINTS: Dict[int, int] = {0: 5, 1: 3, 2: 1}
MAX_POINTS_PER_TEAM = DISTANCE_POINTS[0]

EntryLike = Union[Entry, Mapping[str, Any]]
WinsLike = Union[WinsTable, Mapping[str, Any]]
RankedList = Tuple[str, ...]


class ScoringError(Exception):
    """Base exception for scoring errors."""

    pass


class InvalidInputError(ScoringError):
    """Raised when an argument has the wrong shape (not a list, non-numeric wins...)."""

    pass


def compute_score(
    entry: EntryLike,
    wins: WinsLike,
    mode: Union[ScoringMode, str],
    actual: Optional[EntryLike] = None,
) -> ScoreResult:
    """Scores an entry's east/west predictions.

    Args:
        entry: An Entry, or any mapping with ``east`` and ``west`` team id lists.
        wins: Team id -> win count mapping, or a WinsTable snapshot.
        mode: ``weighted`` or ``distance``.
        actual: Authoritative finishing order ({east, west}). Only used in
            distance mode; derived from ``wins`` when omitted.

    Returns:
        ScoreResult with per-conference totals and a per-team breakdown.

    Raises:
        InvalidInputError: If any argument is structurally malformed.
    """
    scoring_mode = coerce_mode(mode)
    east, west = _coerce_entry(entry, "entry")
    wins_map = coerce_wins(wins)

    if scoring_mode == ScoringMode.WEIGHTED:
        east_points, east_detail = _score_weighted(east, wins_map, Conference.EAST)
        west_points, west_detail = _score_weighted(west, wins_map, Conference.WEST)
        return ScoreResult(
            mode=scoring_mode,
            east=east_points,
            west=west_points,
            breakdown=east_detail + west_detail,
        )

    if actual is None:
        actual_east = actual_order_from_wins(wins_map, Conference.EAST)
        actual_west = actual_order_from_wins(wins_map, Conference.WEST)
    else:
        actual_east, actual_west = _coerce_entry(actual, "actual")

    east_points, east_max, east_detail = _score_distance(
        east, actual_east, Conference.EAST
    )
    west_points, west_max, west_detail = _score_distance(
        west, actual_west, Conference.WEST
    )
    return ScoreResult(
        mode=scoring_mode,
        east=east_points,
        west=west_points,
        max_total=east_max + west_max,
        breakdown=east_detail + west_detail,
    )


def score_weighted(
    ranked: Sequence[str],
    wins: WinsLike,
    conference: Union[Conference, str] = Conference.EAST,
) -> float:
    """Weighted-wins score for a single conference list."""
    points, _ = _score_weighted(
        _coerce_ranked_list(ranked, "ranked"), coerce_wins(wins), Conference(conference)
    )
    return points


def score_distance(
    ranked: Sequence[str],
    actual: Sequence[str],
    conference: Union[Conference, str] = Conference.EAST,
) -> Tuple[int, int]:
    """Rank-distance score for a single conference list.

    Returns:
        (points, max attainable points)
    """
    points, maximum, _ = _score_distance(
        _coerce_ranked_list(ranked, "ranked"),
        _coerce_ranked_list(actual, "actual"),
        Conference(conference),
    )
    return points, maximum


def distance_points(diff: int) -> int:
    return DISTANCE_POINTS.get(abs(diff), 0)


def actual_order_from_wins(
    wins: WinsLike, conference: Union[Conference, str]
) -> RankedList:
    """Projects a finishing order for a conference from the wins table.

    Only roster teams that appear in the table are ranked: most wins first,
    team id breaking ties so the order is deterministic.
    """
    wins_map = coerce_wins(wins)
    ranked = [team_id for team_id in roster_ids(Conference(conference)) if team_id in wins_map]
    return tuple(sorted(ranked, key=lambda team_id: (-wins_map[team_id], team_id)))


def coerce_mode(mode: Union[ScoringMode, str]) -> ScoringMode:
    if isinstance(mode, ScoringMode):
        return mode
    if isinstance(mode, str):
        try:
            return ScoringMode(mode.strip().lower())
        except ValueError:
            pass
    raise InvalidInputError(
        f"Unknown scoring mode {mode!r}; expected one of {[m.value for m in ScoringMode]}"
    )


def coerce_wins(wins: WinsLike) -> Dict[str, float]:
    """Returns a fresh team id -> wins dict with bad counts clamped to 0.

    Negative, NaN and infinite values count as zero wins. Anything that is not
    a real number (strings, booleans, None) is rejected.
    """
    if isinstance(wins, WinsTable):
        wins = wins.wins
    if not isinstance(wins, Mapping):
        raise InvalidInputError(
            f"wins must be a mapping of team id to win count, got {type(wins).__name__}"
        )

    coerced: Dict[str, float] = {}
    for team_id, value in wins.items():
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidInputError(
                f"wins for {team_id!r} must be numeric, got {type(value).__name__}"
            )
        if not math.isfinite(value) or value < 0:
            value = 0
        coerced[team_id] = value
    return coerced


def _coerce_entry(entry: EntryLike, label: str) -> Tuple[RankedList, RankedList]:
    if isinstance(entry, Entry):
        return entry.east, entry.west
    if not isinstance(entry, Mapping):
        raise InvalidInputError(
            f"{label} must be an Entry or a mapping with east/west lists, got {type(entry).__name__}"
        )
    missing = [key for key in ("east", "west") if key not in entry]
    if missing:
        raise InvalidInputError(f"{label} is missing {', '.join(missing)}")
    return (
        _coerce_ranked_list(entry["east"], f"{label}.east"),
        _coerce_ranked_list(entry["west"], f"{label}.west"),
    )


def _coerce_ranked_list(ranked: Any, label: str) -> RankedList:
    if not isinstance(ranked, (list, tuple)):
        raise InvalidInputError(
            f"{label} must be a list of team ids, got {type(ranked).__name__}"
        )
    for team_id in ranked:
        if not isinstance(team_id, str):
            raise InvalidInputError(
                f"{label} contains a non-string team id: {team_id!r}"
            )
    return tuple(ranked)


def _roster_ranks(ranked: RankedList, conference: Conference) -> Dict[str, int]:
    """Team id -> 1-indexed rank of its first occurrence, roster teams only."""
    roster = set(roster_ids(conference))
    ranks: Dict[str, int] = {}
    for index, team_id in enumerate(ranked):
        if team_id in roster:
            ranks.setdefault(team_id, index + 1)
    return ranks


def _score_weighted(
    ranked: RankedList, wins: Dict[str, float], conference: Conference
) -> Tuple[float, List[PerTeamDetail]]:
    # Weight comes from the raw position, so duplicates and off-roster ids
    # still occupy their slot.
    size = len(ranked)
    roster = set(roster_ids(conference))
    seen = set()
    points_total: float = 0
    details: List[PerTeamDetail] = []

    for index, team_id in enumerate(ranked):
        if team_id in seen:
            continue
        seen.add(team_id)
        if team_id not in roster or team_id not in wins:
            continue

        weight = size - index
        team_wins = wins[team_id]
        points = team_wins * weight
        points_total += points
        details.append(
            PerTeamDetail(
                team_id=team_id,
                conference=conference,
                predicted_rank=index + 1,
                wins=team_wins,
                weight=weight,
                points=points,
            )
        )

    return points_total, details


def _score_distance(
    ranked: RankedList, actual: RankedList, conference: Conference
) -> Tuple[int, int, List[PerTeamDetail]]:
    predicted_ranks = _roster_ranks(ranked, conference)
    actual_ranks = _roster_ranks(actual, conference)
    points_total = 0
    details: List[PerTeamDetail] = []

    for team_id, predicted_rank in predicted_ranks.items():
        actual_rank = actual_ranks.get(team_id)
        if actual_rank is None:
            continue

        points = distance_points(predicted_rank - actual_rank)
        points_total += points
        details.append(
            PerTeamDetail(
                team_id=team_id,
                conference=conference,
                predicted_rank=predicted_rank,
                actual_rank=actual_rank,
                points=points,
            )
        )

    return points_total, MAX_POINTS_PER_TEAM * len(actual_ranks), details
