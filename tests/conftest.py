"""
Pytest configuration and fixtures for the goals backtest engine tests.
"""

import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# Add the project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.config.rosters import Roster, build_roster
from src.models.match import MatchRecord
from src.normalization.normalizer import Normalizer


def _goals_row(total: Any) -> Dict[str, Any]:
    """Splits a goal total into FTHG/FTAG columns (None leaves them blank)."""
    if total is None:
        return {"FTHG": "", "FTAG": ""}
    return {"FTHG": total, "FTAG": 0}


@pytest.fixture
def normalizer() -> Normalizer:
    return Normalizer()


@pytest.fixture
def make_record(normalizer):
    """Factory building a normalized record from a few keyword columns."""

    def _make(
        trade: Any = "t1",
        total: Any = 2,
        season: str = "2020",
        league: str = "Scottish Premiership",
        home: str = "Celtic",
        away: str = "Rangers",
        **columns: Any,
    ) -> MatchRecord:
        row: Dict[str, Any] = {
            "Season": season,
            "League": league,
            "HomeTeam": home,
            "AwayTeam": away,
            "Trade": trade,
            "odd": columns.pop("odd", 1.9),
            "odd2": columns.pop("odd2", 1.9),
            "odd3": columns.pop("odd3", 2.0),
        }
        row.update(_goals_row(total))
        row.update(columns)
        return normalizer.normalize_row(row)

    return _make


@pytest.fixture
def roster() -> Roster:
    return build_roster(
        {
            "Scottish Premiership": ["Celtic", "Rangers", "Hearts"],
            "Premier League": ["Arsenal", "Chelsea"],
        }
    )


@pytest.fixture
def sample_csv() -> str:
    return (
        "Season,League,HomeTeam,AwayTeam,Trade,FTHG,FTAG,odd,odd2,odd3,Under2.5\n"
        "2019,Scottish Premiership,Celtic,Rangers,t3,2,2,1.70,2.10,2.5,0\n"
        "2019,Scottish Premiership,Hearts,Celtic,t1,0,1,1.90,1.85,2.4,1\n"
        "2020,Scottish Premiership,Rangers,Aberdeen,t2,3,1,1.60,2.30,2.6,0\n"
        "2020,Premier League,Arsenal,Chelsea,t4,,,1.80,2.00,2.5,\n"
        "\n"
        "2018,Premier League,Chelsea,Everton,t5,1,0,2.00,1.75,2.2,1\n"
    )
