import math
import re
from typing import Any, Mapping, Optional, Union

from src.models.match import MatchRecord

# Synonym lists are searched in order; the first key present wins even when its
# value turns out to be unusable.
HOME_GOAL_KEYS = ("FTHG", "HomeGoals", "HG", "home_goals", "FHG", "HomeG")
AWAY_GOAL_KEYS = ("FTAG", "AwayGoals", "AG", "away_goals", "FAG", "AwayG")
SCORE_KEYS = ("FTScore", "Score", "FullTimeScore", "Result")
AGGREGATE_KEYS = ("Goals", "totalgoals")

SCORE_PATTERN = re.compile(r"^\s*(\d+)\s*[-:]\s*(\d+)\s*$")
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def to_number(value: Any) -> Optional[float]:
    """Strict numeric coercion: numbers pass, fully numeric strings convert."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if not NUMBER_PATTERN.match(text):
            return None
        number = float(text)
    else:
        return None
    return number if math.isfinite(number) else None


def _first_present(row: Mapping[str, Any], keys) -> Optional[float]:
    for key in keys:
        if key in row:
            return to_number(row[key])
    return None


def resolve_total_goals(record: Union[MatchRecord, Mapping[str, Any]]) -> Optional[float]:
    """
    Derives the full-time goal total of a match row.

    Resolution order, first success wins:
    1. home + away goal columns (first present synonym on each side),
    2. a "<home>-<away>" or "<home>:<away>" score string,
    3. an aggregate goals column.

    Returns:
        The total, or None when nothing resolves (the row is then excluded
        from market evaluation).
    """
    row = record.fields if isinstance(record, MatchRecord) else record

    home = _first_present(row, HOME_GOAL_KEYS)
    away = _first_present(row, AWAY_GOAL_KEYS)
    if home is not None and away is not None:
        return home + away

    for key in SCORE_KEYS:
        value = row.get(key)
        if value is None:
            continue
        match = SCORE_PATTERN.match(str(value))
        if match:
            return float(int(match.group(1)) + int(match.group(2)))

    for key in AGGREGATE_KEYS:
        if key in row:
            total = to_number(row[key])
            if total is not None:
                return total

    return None
