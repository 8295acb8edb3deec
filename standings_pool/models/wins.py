from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TeamWins(BaseModel):
    """A single team's win count as reported by the standings feed."""

    model_config = ConfigDict(frozen=True)

    team_id: str
    wins: int = Field(..., ge=0)


class WinsTable(BaseModel):
    """Read-only snapshot of current win counts, keyed by team id.

    A partially populated table is valid; absent teams count as zero wins.
    """

    model_config = ConfigDict(frozen=True)

    wins: Dict[str, int] = Field(default_factory=dict)
    last_updated: datetime = EPOCH

    @classmethod
    def from_rows(cls, rows: List[Dict[str, Any]]) -> "WinsTable":
        """Builds a snapshot from ``team_wins`` rows ({team_id, wins, updated_at})."""
        wins: Dict[str, int] = {}
        last = EPOCH
        for row in rows:
            wins[row["team_id"]] = row["wins"]
            updated_at = _parse_timestamp(row.get("updated_at"))
            if updated_at and updated_at > last:
                last = updated_at
        return cls(wins=wins, last_updated=last)

    def get(self, team_id: str, default: int = 0) -> int:
        return self.wins.get(team_id, default)

    def to_payload(self) -> Dict[str, Any]:
        return {"wins": dict(self.wins), "updatedAt": self.last_updated.isoformat()}


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    parsed = (
        value
        if isinstance(value, datetime)
        else datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    )
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
