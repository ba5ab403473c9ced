from typing import Iterable, List, Optional, Sequence, Union

from loguru import logger

from src.config.rosters import Roster
from src.models.enums import ALL_SEASONS, SeasonMode
from src.models.match import MatchRecord


def _is_unrestricted(season: Optional[str]) -> bool:
    return season is None or str(season).strip() in ("", ALL_SEASONS)


def available_seasons(records: Iterable[MatchRecord]) -> List[str]:
    """Distinct non-empty season labels, sorted lexically."""
    return sorted({record.season for record in records if record.season})


def available_leagues(records: Iterable[MatchRecord]) -> List[str]:
    return sorted({record.league for record in records if record.league})


def filter_by_season_exact(
    records: Sequence[MatchRecord], season: Optional[str]
) -> List[MatchRecord]:
    """Keeps only records of exactly this season (`all` keeps everything)."""
    if _is_unrestricted(season):
        return list(records)
    wanted = str(season).strip()
    return [record for record in records if record.season == wanted]


def filter_by_season_from(
    records: Sequence[MatchRecord], season: Optional[str]
) -> List[MatchRecord]:
    """Keeps this season and every season sorting after it.

    A season that does not occur in the data keeps nothing.
    """
    if _is_unrestricted(season):
        return list(records)
    seasons = available_seasons(records)
    wanted = str(season).strip()
    if wanted not in seasons:
        logger.debug(f"Season '{wanted}' not present in data, no records kept.")
        return []
    included = set(seasons[seasons.index(wanted) :])
    return [record for record in records if record.season in included]


def filter_by_season(
    records: Sequence[MatchRecord],
    mode: Union[SeasonMode, str],
    season: Optional[str],
) -> List[MatchRecord]:
    mode = SeasonMode(mode)
    if mode == SeasonMode.EXACT:
        return filter_by_season_exact(records, season)
    return filter_by_season_from(records, season)


def filter_by_league(
    records: Sequence[MatchRecord], league: Optional[str]
) -> List[MatchRecord]:
    return [record for record in records if record.league == league]


def filter_by_roster(
    records: Sequence[MatchRecord], league: str, roster: Roster
) -> List[MatchRecord]:
    """Keeps matches involving a roster team; leagues without a roster are left alone."""
    if not roster.has_league(league):
        return list(records)
    return [
        record
        for record in records
        if roster.contains(league, record.home_team)
        or roster.contains(league, record.away_team)
    ]


def filter_by_teams(
    records: Sequence[MatchRecord], selected_teams: Iterable[str]
) -> List[MatchRecord]:
    """Keeps matches where either side's `League:Team` key was selected."""
    selected = set(selected_teams)
    return [
        record
        for record in records
        if any(key in selected for key in record.team_keys())
    ]


def order_by_trade(records: Iterable[MatchRecord]) -> List[MatchRecord]:
    """Drops records without a trade number and sorts the rest by it.

    The resulting order stands in for chronological order, so capital
    compounding depends on it.
    """
    valid = [record for record in records if record.trade_number]
    return sorted(valid, key=lambda record: record.trade_number)
