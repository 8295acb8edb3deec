# standings_pool/reference/teams.py
"""Canonical league rosters and feed abbreviation mapping."""

from typing import Dict, List, Optional, Tuple

from standings_pool.models.enums import Conference
from standings_pool.models.team import Team


def _roster(conference: Conference, pairs: List[Tuple[str, str]]) -> Tuple[Team, ...]:
    return tuple(Team(id=team_id, name=name, conference=conference) for team_id, name in pairs)


# Ordered by team name (the default list a new entry starts from)
EAST_TEAMS = _roster(
    Conference.EAST,
    [
        ("ATL", "Atlanta Hawks"),
        ("BOS", "Boston Celtics"),
        ("BKN", "Brooklyn Nets"),
        ("CHA", "Charlotte Hornets"),
        ("CHI", "Chicago Bulls"),
        ("CLE", "Cleveland Cavaliers"),
        ("DET", "Detroit Pistons"),
        ("IND", "Indiana Pacers"),
        ("MIA", "Miami Heat"),
        ("MIL", "Milwaukee Bucks"),
        ("NYK", "New York Knicks"),
        ("ORL", "Orlando Magic"),
        ("PHI", "Philadelphia 76ers"),
        ("TOR", "Toronto Raptors"),
        ("WAS", "Washington Wizards"),
    ],
)

WEST_TEAMS = _roster(
    Conference.WEST,
    [
        ("DAL", "Dallas Mavericks"),
        ("DEN", "Denver Nuggets"),
        ("GSW", "Golden State Warriors"),
        ("HOU", "Houston Rockets"),
        ("LAC", "Los Angeles Clippers"),
        ("LAL", "Los Angeles Lakers"),
        ("MEM", "Memphis Grizzlies"),
        ("MIN", "Minnesota Timberwolves"),
        ("NOP", "New Orleans Pelicans"),
        ("OKC", "Oklahoma City Thunder"),
        ("PHX", "Phoenix Suns"),
        ("POR", "Portland Trail Blazers"),
        ("SAC", "Sacramento Kings"),
        ("SAS", "San Antonio Spurs"),
        ("UTA", "Utah Jazz"),
    ],
)

# Previous regular-season finishing order, used for the "autofill" starter entry
LAST_SEASON_EAST: Tuple[str, ...] = (
    "CLE", "BOS", "NYK", "IND", "MIL", "DET", "ORL", "ATL",
    "CHI", "MIA", "TOR", "BKN", "PHI", "CHA", "WAS",
)
LAST_SEASON_WEST: Tuple[str, ...] = (
    "OKC", "HOU", "LAL", "DEN", "LAC", "MIN", "GSW", "MEM",
    "SAC", "DAL", "PHX", "POR", "SAS", "NOP", "UTA",
)

ROSTERS: Dict[Conference, Tuple[Team, ...]] = {
    Conference.EAST: EAST_TEAMS,
    Conference.WEST: WEST_TEAMS,
}

TEAMS_BY_ID: Dict[str, Team] = {t.id: t for t in EAST_TEAMS + WEST_TEAMS}

# Feed abbreviation -> canonical team id. Most match 1:1; aliases cover the
# spellings the feed has used historically.
FEED_ABBREVIATION_MAP: Dict[str, str] = {
    **{team_id: team_id for team_id in TEAMS_BY_ID},
    "BRK": "BKN",
    "CHO": "CHA",
    "GS": "GSW",
    "NO": "NOP",
    "NY": "NYK",
    "PHO": "PHX",
    "SA": "SAS",
    "UTAH": "UTA",
    "WSH": "WAS",
}


def roster_ids(conference: Conference) -> Tuple[str, ...]:
    return tuple(t.id for t in ROSTERS[Conference(conference)])


def conference_of(team_id: str) -> Optional[Conference]:
    """Returns the conference a team id belongs to, or None if unknown."""
    team = TEAMS_BY_ID.get(team_id)
    return team.conference if team else None
