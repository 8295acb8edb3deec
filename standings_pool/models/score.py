from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from .enums import Conference, ScoringMode


class PerTeamDetail(BaseModel):
    """How a single predicted team contributed to a conference score."""

    model_config = ConfigDict(frozen=True)

    team_id: str
    conference: Conference
    predicted_rank: int  # 1-indexed
    actual_rank: Optional[int] = None  # distance mode only
    wins: Optional[float] = None  # weighted mode only
    weight: Optional[int] = None  # weighted mode only
    points: float


class ScoreResult(BaseModel):
    """Derived score for one entry against one wins snapshot. Never persisted."""

    model_config = ConfigDict(frozen=True)

    mode: ScoringMode
    east: float
    west: float
    max_total: Optional[float] = None
    breakdown: List[PerTeamDetail] = []

    @computed_field  # type: ignore[misc]
    @property
    def total(self) -> float:
        return self.east + self.west

    def per_conference(self) -> dict[str, float]:
        return {Conference.EAST.value: self.east, Conference.WEST.value: self.west}


class StandingRow(BaseModel):
    """One ranked line of the pool standings table."""

    model_config = ConfigDict(frozen=True)

    rank: int
    entry_id: str
    display_name: str
    user_id: Optional[str] = None
    points: float
    east: float
    west: float
    max_points: Optional[float] = None
    submitted_at: Optional[datetime] = None

    def to_payload(self) -> dict:
        return {
            "rank": self.rank,
            "id": self.entry_id,
            "name": self.display_name,
            "userId": self.user_id,
            "points": self.points,
            "east": self.east,
            "west": self.west,
            "max": self.max_points,
            "submittedAt": self.submitted_at.isoformat() if self.submitted_at else None,
        }
