from typing import List, Optional, Sequence

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from src.calculation.ranking import RANKING_LIMIT, rank_teams
from src.calculation.simulator import simulate
from src.calculation.stats import chart_points, summarize
from src.config.rosters import Roster
from src.filters.pipeline import (
    available_leagues,
    available_seasons,
    filter_by_league,
    filter_by_roster,
    filter_by_season,
    filter_by_season_from,
    filter_by_teams,
    order_by_trade,
)
from src.models.enums import ALL_SEASONS, MarketType, OutcomeRule, SeasonMode
from src.models.match import MatchRecord
from src.models.results import (
    BacktestResult,
    FilterOptions,
    InvestmentResult,
    LeagueMarketPerformance,
    RankingPair,
)

# Fixed parameters of the league-wide market analysis
ANALYSIS_STARTING_CAPITAL = 1000.0
ANALYSIS_STAKE_PERCENTAGE = 5.0


class SelectionError(ValueError):
    """A required selection parameter (league, teams) was not supplied."""

    pass


class InvestmentRequest(BaseModel):
    """Parameters of an investment-calculator run."""

    model_config = ConfigDict(frozen=True)

    starting_capital: float = Field(1000.0, gt=0)
    stake_percentage: float = Field(5.0, ge=0, le=100)
    season: Optional[str] = ALL_SEASONS
    season_mode: SeasonMode = SeasonMode.EXACT
    league: Optional[str] = None
    market: MarketType = MarketType.OVER_25
    t9_teams_active: bool = False
    outcome_rule: OutcomeRule = OutcomeRule.THRESHOLD


class BacktestRequest(BaseModel):
    """Parameters of a selected-teams backtest."""

    model_config = ConfigDict(frozen=True)

    selected_teams: List[str] = Field(default_factory=list)  # `League:Team` keys
    market: MarketType = MarketType.OVER_25
    season: Optional[str] = ALL_SEASONS
    starting_capital: float = Field(1000.0, gt=0)
    stake_percentage: float = Field(5.0, ge=0, le=100)
    outcome_rule: OutcomeRule = OutcomeRule.FLAG


def run_investment(
    records: Sequence[MatchRecord], request: InvestmentRequest, roster: Roster
) -> InvestmentResult:
    """Season -> league -> T9 -> trade order -> simulation -> stats."""
    if not request.league:
        raise SelectionError("No league selected.")

    scoped = filter_by_season(records, request.season_mode, request.season)
    scoped = filter_by_league(scoped, request.league)
    if request.t9_teams_active and roster.has_league(request.league):
        scoped = filter_by_roster(scoped, request.league, roster)
    ordered = order_by_trade(scoped)

    logger.info(
        f"Investment run: {request.market.value} in {request.league}, season "
        f"{request.season} ({request.season_mode.value}), {len(ordered)} ordered records."
    )
    entries = simulate(
        ordered,
        request.starting_capital,
        request.stake_percentage,
        request.market,
        request.outcome_rule,
    )
    return InvestmentResult(
        processed_data=entries,
        stats=summarize(entries, request.starting_capital),
        chart_data=chart_points(entries),
    )


def run_backtest(
    records: Sequence[MatchRecord], request: BacktestRequest
) -> BacktestResult:
    """Backtests a market on the matches of hand-picked teams."""
    if not request.selected_teams:
        raise SelectionError("No teams selected.")

    scoped = filter_by_season_from(records, request.season)
    scoped = filter_by_teams(scoped, request.selected_teams)
    ordered = order_by_trade(scoped)

    logger.info(
        f"Backtest: {request.market.value} for {len(request.selected_teams)} teams, "
        f"{len(ordered)} ordered records."
    )
    entries = simulate(
        ordered,
        request.starting_capital,
        request.stake_percentage,
        request.market,
        request.outcome_rule,
    )
    return BacktestResult(
        processed_data=entries,
        stats=summarize(entries, request.starting_capital),
        total_games=len(entries),
        selected_teams_count=len(request.selected_teams),
    )


def compute_rankings(
    records: Sequence[MatchRecord],
    league: Optional[str],
    season: Optional[str],
    market: MarketType,
    t9_teams_active: bool,
    roster: Roster,
    season_mode: SeasonMode = SeasonMode.EXACT,
    limit: int = RANKING_LIMIT,
) -> RankingPair:
    """Team rankings for the selected market and for its opposite."""
    if not league:
        raise SelectionError("No league selected.")

    def _rank(opposite: bool):
        return rank_teams(
            records,
            league,
            season,
            market,
            roster_active=t9_teams_active,
            opposite=opposite,
            roster=roster,
            season_mode=season_mode,
            limit=limit,
        )

    return RankingPair(
        selected_market_ranking=_rank(False),
        opposite_market_ranking=_rank(True),
    )


def filter_options(records: Sequence[MatchRecord], roster: Roster) -> FilterOptions:
    return FilterOptions(
        seasons=available_seasons(records),
        leagues=available_leagues(records),
        t9_teams=roster.as_lists(),
    )


def analyze_league_markets(
    records: Sequence[MatchRecord],
    starting_capital: float = ANALYSIS_STARTING_CAPITAL,
    stake_percentage: float = ANALYSIS_STAKE_PERCENTAGE,
) -> List[LeagueMarketPerformance]:
    """Over/under 2.5 performance of every league, best ROI first.

    Matches without a goal total are skipped rather than counted as losses.
    """
    markets: List[LeagueMarketPerformance] = []
    for league in available_leagues(records):
        ordered = [
            record
            for record in order_by_trade(filter_by_league(records, league))
            if record.total_goals is not None
        ]
        if not ordered:
            continue

        for market in (MarketType.OVER_25, MarketType.UNDER_25):
            entries = simulate(ordered, starting_capital, stake_percentage, market)
            stats = summarize(entries, starting_capital)
            wins = sum(1 for entry in entries if entry.is_win)
            markets.append(
                LeagueMarketPerformance(
                    id=f"{league}-{market.value}",
                    league=league,
                    strategy=market,
                    wins=wins,
                    losses=len(entries) - wins,
                    total_games=stats.total_games,
                    win_rate=stats.win_rate,
                    roi=stats.roi,
                    income=stats.total_return,
                    final_capital=stats.final_capital,
                )
            )

    markets.sort(key=lambda performance: performance.roi, reverse=True)
    logger.info(f"Analyzed {len(markets)} league markets.")
    return markets
