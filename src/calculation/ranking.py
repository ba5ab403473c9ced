from typing import Dict, List, Optional, Sequence, Union

from loguru import logger

from src.calculation.simulator import is_market_win
from src.config.rosters import Roster
from src.filters.pipeline import (
    filter_by_league,
    filter_by_roster,
    filter_by_season,
    filter_by_season_from,
)
from src.models.enums import ALL_SEASONS, MarketType, SeasonMode
from src.models.match import MatchRecord
from src.models.results import RankingResult, TeamMarketProfile

RANKING_LIMIT = 30

# There is no over6 market, so under6 falls back to over2.5
OPPOSITE_MARKETS: Dict[MarketType, MarketType] = {
    MarketType.UNDER_25: MarketType.OVER_25,
    MarketType.OVER_25: MarketType.UNDER_25,
    MarketType.UNDER_6: MarketType.OVER_25,
}


def opposite_market(market: Union[MarketType, str]) -> MarketType:
    return OPPOSITE_MARKETS[MarketType(market)]


def rank_teams(
    records: Sequence[MatchRecord],
    league: str,
    season: Optional[str],
    market: Union[MarketType, str],
    roster_active: bool = False,
    opposite: bool = False,
    roster: Optional[Roster] = None,
    season_mode: Union[SeasonMode, str] = SeasonMode.EXACT,
    limit: int = RANKING_LIMIT,
) -> RankingResult:
    """
    Counts, per team, the matches that landed in a market.

    Every qualifying match credits both its home and its away team. Under6 is
    judged per match here, never in groups of three.

    Returns:
        Labels and counts of the top `limit` teams, highest count first; ties
        keep the order in which teams were first counted.
    """
    market = MarketType(market)
    target = opposite_market(market) if opposite else market

    scoped = filter_by_season(records, season_mode, season)
    scoped = filter_by_league(scoped, league)
    use_roster = roster_active and roster is not None and roster.has_league(league)
    if use_roster:
        scoped = filter_by_roster(scoped, league, roster)

    counts: Dict[str, int] = {}
    for record in scoped:
        if not is_market_win(target, record.total_goals):
            continue
        for team in (record.home_team, record.away_team):
            if not team:
                continue
            counts[team] = counts.get(team, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]
    logger.debug(
        f"Ranked {len(counts)} teams for {target.value} in {league} "
        f"({len(scoped)} matches in scope)."
    )
    return RankingResult(
        market=target,
        labels=[team for team, _ in ranked],
        values=[count for _, count in ranked],
    )


def _percentage(count: int, total: int) -> float:
    return count / total * 100 if total > 0 else 0.0


def team_popularity(
    records: Sequence[MatchRecord], season: Optional[str] = ALL_SEASONS
) -> Dict[str, Dict[str, TeamMarketProfile]]:
    """Per league and team, how often their matches went over 2.5, under 2.5 and under 6."""
    scoped = filter_by_season_from(records, season)

    by_league: Dict[str, List[MatchRecord]] = {}
    for record in scoped:
        if record.league:
            by_league.setdefault(record.league, []).append(record)

    popularity: Dict[str, Dict[str, TeamMarketProfile]] = {}
    for league, league_records in by_league.items():
        matches_by_team: Dict[str, List[MatchRecord]] = {}
        for record in league_records:
            for team in dict.fromkeys((record.home_team, record.away_team)):
                if team:
                    matches_by_team.setdefault(team, []).append(record)

        popularity[league] = {}
        for team, matches in matches_by_team.items():
            valid = [match for match in matches if match.total_goals is not None]
            over25 = sum(1 for m in valid if is_market_win(MarketType.OVER_25, m.total_goals))
            under25 = sum(1 for m in valid if is_market_win(MarketType.UNDER_25, m.total_goals))
            under6 = sum(1 for m in valid if is_market_win(MarketType.UNDER_6, m.total_goals))
            popularity[league][team] = TeamMarketProfile(
                over25_percentage=_percentage(over25, len(valid)),
                under25_percentage=_percentage(under25, len(valid)),
                under6_percentage=_percentage(under6, len(valid)),
                total_matches=len(matches),
                valid_matches=len(valid),
                over25_count=over25,
                under25_count=under25,
                under6_count=under6,
            )

    logger.info(
        f"Computed market profiles for {sum(len(t) for t in popularity.values())} teams "
        f"across {len(popularity)} leagues."
    )
    return popularity
