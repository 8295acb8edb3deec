# standings_pool/models/team.py
from pydantic import BaseModel, ConfigDict

from .enums import Conference


class Team(BaseModel):
    """Immutable reference data for one franchise."""

    model_config = ConfigDict(frozen=True)

    id: str  # Stable league abbreviation, e.g. "BOS"
    name: str
    conference: Conference
