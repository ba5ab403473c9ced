import json
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
)

# Fixed per-league allow-lists ("T9") used to scope analysis to the
# strongest nine clubs of each league.
DEFAULT_T9_ROSTERS: Dict[str, Tuple[str, ...]] = {
    "Premier League": (
        "Arsenal",
        "Aston Villa",
        "Chelsea",
        "Liverpool",
        "Man City",
        "Man United",
        "Newcastle",
        "Tottenham",
        "West Ham",
    ),
    "Scottish Premiership": (
        "Aberdeen",
        "Celtic",
        "Dundee",
        "Hearts",
        "Hibernian",
        "Kilmarnock",
        "Motherwell",
        "Rangers",
        "St Mirren",
    ),
    "Bundesliga": (
        "Bayern Munich",
        "Dortmund",
        "Ein Frankfurt",
        "Freiburg",
        "Leverkusen",
        "M'gladbach",
        "RB Leipzig",
        "Stuttgart",
        "Wolfsburg",
    ),
}


class RosterError(Exception):
    """Raised when a roster file cannot be read or validated."""

    pass


class Roster(BaseModel):
    """Read-only league -> ordered team names table."""

    model_config = ConfigDict(frozen=True)

    teams: Mapping[str, Tuple[str, ...]] = Field(
        default_factory=dict, validate_default=True
    )

    @field_validator("teams")
    @classmethod
    def freeze_teams(cls, v: Mapping[str, Tuple[str, ...]]) -> Mapping[str, Tuple[str, ...]]:
        return MappingProxyType(dict(v))

    @field_serializer("teams")
    def serialize_teams(self, teams: Mapping[str, Tuple[str, ...]]) -> Dict[str, list]:
        return {league: list(names) for league, names in teams.items()}

    def has_league(self, league: str) -> bool:
        return league in self.teams

    def teams_for(self, league: str) -> Tuple[str, ...]:
        return self.teams.get(league, ())

    def contains(self, league: str, team: str) -> bool:
        return team in self.teams.get(league, ())

    def as_lists(self) -> Dict[str, list]:
        return {league: list(teams) for league, teams in self.teams.items()}


def build_roster(table: Mapping[str, Sequence[str]]) -> Roster:
    return Roster(teams=dict(table))


def load_roster(path: Optional[Path] = None) -> Roster:
    """Loads the roster table from a JSON file, or the built-in table when no path is given."""
    if path is None:
        logger.debug(f"Using built-in T9 roster for {len(DEFAULT_T9_ROSTERS)} leagues.")
        return build_roster(DEFAULT_T9_ROSTERS)

    try:
        with open(path, "r", encoding="utf-8") as f:
            table = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read roster file {path}: {e}")
        raise RosterError(f"Could not read roster file {path}") from e

    if not isinstance(table, dict):
        raise RosterError(f"Roster file {path} must contain a JSON object.")

    try:
        roster = build_roster(table)
    except ValidationError as e:
        raise RosterError(f"Invalid roster table in {path}: {e}") from e

    logger.info(f"Loaded T9 roster for {len(roster.teams)} leagues from {path}")
    return roster
