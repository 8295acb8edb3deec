import math
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from standings_pool.config.settings import settings
from standings_pool.models.wins import TeamWins
from standings_pool.reference.teams import FEED_ABBREVIATION_MAP


class NormalizationError(Exception):
    """Custom exception for standings normalization errors."""

    pass


class IncompleteStandingsError(NormalizationError):
    """Raised when the feed yields too few teams to trust as a full refresh."""

    def __init__(self, count: int, minimum: int):
        super().__init__(f"Too few rows from standings feed: {count} < {minimum}")
        self.count = count
        self.minimum = minimum


class StandingsNormalizer:
    """Turns a raw standings document into one TeamWins row per known team."""

    def __init__(
        self,
        abbreviation_map: Optional[Dict[str, str]] = None,
        min_rows: Optional[int] = None,
    ):
        self.abbreviation_map = abbreviation_map or FEED_ABBREVIATION_MAP
        self.min_rows = settings.min_feed_rows if min_rows is None else min_rows

    def normalize(self, raw: Dict[str, Any]) -> List[TeamWins]:
        """Extracts {team_id, wins} for every mapped team in the document.

        Raises:
            NormalizationError: If the document is not an object.
            IncompleteStandingsError: If fewer than ``min_rows`` teams were found,
                so stale values are kept instead of wiped.
        """
        if not isinstance(raw, dict):
            raise NormalizationError(
                f"Standings document must be an object, got {type(raw).__name__}"
            )

        rows: Dict[str, TeamWins] = {}
        skipped = 0
        for standing in self._iter_entries(raw):
            abbreviation = (standing.get("team") or {}).get("abbreviation")
            if not abbreviation:
                continue
            team_id = self.abbreviation_map.get(abbreviation)
            if not team_id:
                logger.debug(f"Skipping unmapped team abbreviation '{abbreviation}'")
                skipped += 1
                continue
            rows[team_id] = TeamWins(
                team_id=team_id, wins=self._extract_wins(standing.get("stats"))
            )

        logger.info(
            f"Normalized {len(rows)} team win rows ({skipped} unmapped abbreviations skipped)."
        )
        if len(rows) < self.min_rows:
            raise IncompleteStandingsError(len(rows), self.min_rows)
        return list(rows.values())

    def _iter_entries(self, raw: Dict[str, Any]) -> Iterable[Dict[str, Any]]:
        # Conference blocks live under "children"; fall back to the root object
        containers = raw.get("children")
        if not isinstance(containers, list):
            containers = [raw]

        for block in containers:
            if not isinstance(block, dict):
                continue
            standings = block.get("standings") or block
            entries = standings.get("entries")
            if not entries:
                nested = standings.get("children") or [{}]
                entries = ((nested[0] or {}).get("standings") or {}).get("entries")
            for standing in entries or []:
                if isinstance(standing, dict):
                    yield standing

    def _extract_wins(self, stats: Any) -> int:
        wins_stat = next(
            (
                s
                for s in stats or []
                if isinstance(s, dict)
                and (
                    s.get("name") == "wins"
                    or s.get("shortDisplayName") == "W"
                    or s.get("description") == "Wins"
                )
            ),
            None,
        )
        if wins_stat is None:
            return 0

        raw_value = wins_stat.get("value")
        if raw_value is None:
            raw_value = wins_stat.get("displayValue", 0)
        return self._parse_count(raw_value)

    def _parse_count(self, value: Any) -> int:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0
        if not math.isfinite(number) or number < 0:
            return 0
        return int(number)
