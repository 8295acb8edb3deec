from datetime import datetime, timezone
from typing import Optional, Tuple, Sequence
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import Conference

DISPLAY_NAME_MIN_LENGTH = 2
DISPLAY_NAME_MAX_LENGTH = 40


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_entry_id() -> str:
    return uuid.uuid4().hex


class Entry(BaseModel):
    """One user submission: a predicted finishing order for each conference.

    Entries are never edited. Resubmitting creates a new Entry which supersedes
    the older one for the same user and display name.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=_new_entry_id)
    display_name: str = Field(..., alias="name")
    user_id: Optional[str] = None
    season: Optional[str] = None
    east: Tuple[str, ...] = ()
    west: Tuple[str, ...] = ()
    submitted_at: datetime = Field(default_factory=_utcnow)

    @field_validator("display_name")
    @classmethod
    def _check_display_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not DISPLAY_NAME_MIN_LENGTH <= len(trimmed) <= DISPLAY_NAME_MAX_LENGTH:
            raise ValueError(
                f"display name must be {DISPLAY_NAME_MIN_LENGTH}-{DISPLAY_NAME_MAX_LENGTH} characters"
            )
        return trimmed

    @classmethod
    def new(
        cls,
        display_name: str,
        east: Sequence[str],
        west: Sequence[str],
        user_id: Optional[str] = None,
        season: Optional[str] = None,
    ) -> "Entry":
        """Creates a fresh entry stamped with the current UTC time."""
        return cls(
            display_name=display_name,
            east=tuple(east),
            west=tuple(west),
            user_id=user_id,
            season=season,
        )

    def ranked_list(self, conference: Conference) -> Tuple[str, ...]:
        return self.east if conference == Conference.EAST else self.west

    def to_record(self) -> dict:
        """Row shape used by the entries table."""
        return {
            "id": self.id,
            "name": self.display_name,
            "user_id": self.user_id,
            "season": self.season,
            "east": list(self.east),
            "west": list(self.west),
            "submitted_at": self.submitted_at.isoformat(),
        }
