import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

# --- Settings/Logging ---
from src.logging.setup import setup_logging
from src.config.settings import settings

setup_logging()

from loguru import logger

from pydantic import ValidationError
from rich import print
from rich.panel import Panel
from rich.table import Table

from src.calculation.investment import (
    BacktestRequest,
    InvestmentRequest,
    SelectionError,
    analyze_league_markets,
    compute_rankings,
    filter_options,
    run_backtest,
    run_investment,
)
from src.calculation.ranking import team_popularity
from src.config.rosters import RosterError, load_roster
from src.models.enums import ALL_SEASONS, MarketType, OutcomeRule, SeasonMode
from src.models.match import MatchRecord
from src.models.results import RankingResult, StatsSummary
from src.normalization.normalizer import NormalizationError
from src.sources.base_source import DataSourceError
from src.sources.loader import build_source, load_records


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Backtest fixed-stake goals-market strategies on historical matches."
    )
    parser.add_argument(
        "--source", default=settings.data_source, help="CSV path or http(s) URL."
    )
    parser.add_argument("--output", help="Write the JSON payload to this file.")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_run_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--market", choices=[m.value for m in MarketType], default="over2.5")
        p.add_argument("--season", default=ALL_SEASONS)
        p.add_argument("--capital", type=float, default=settings.starting_capital)
        p.add_argument("--stake", type=float, default=settings.stake_percentage)

    invest = sub.add_parser("invest", help="Investment calculator for one league.")
    add_run_args(invest)
    invest.add_argument("--league")
    invest.add_argument("--t9", action="store_true", help="Restrict to T9 roster teams.")
    invest.add_argument(
        "--season-mode",
        choices=[m.value for m in SeasonMode],
        default=settings.season_mode.value,
    )
    invest.add_argument(
        "--rule",
        choices=[r.value for r in OutcomeRule],
        default=settings.outcome_rule.value,
    )

    backtest = sub.add_parser("backtest", help="Backtest selected League:Team keys.")
    add_run_args(backtest)
    backtest.add_argument("--team", action="append", default=[], dest="teams")
    backtest.add_argument(
        "--rule", choices=[r.value for r in OutcomeRule], default=OutcomeRule.FLAG.value
    )

    rank = sub.add_parser("rank", help="Team rankings for a market and its opposite.")
    rank.add_argument("--market", choices=[m.value for m in MarketType], default="over2.5")
    rank.add_argument("--league")
    rank.add_argument("--season", default=ALL_SEASONS)
    rank.add_argument("--t9", action="store_true")
    rank.add_argument(
        "--season-mode",
        choices=[m.value for m in SeasonMode],
        default=settings.season_mode.value,
    )

    sub.add_parser("filters", help="Available seasons, leagues and T9 rosters.")
    sub.add_parser("markets", help="Over/under 2.5 performance of every league.")
    popularity = sub.add_parser("popularity", help="Per-team market profiles.")
    popularity.add_argument("--season", default=ALL_SEASONS)
    return parser


def _stats_panel(stats: StatsSummary, title: str) -> Panel:
    body = (
        f"Trades: {stats.total_games}\n"
        f"Final capital: {stats.final_capital:.2f}\n"
        f"Total return: {stats.total_return:.2f}\n"
        f"Win rate: {stats.win_rate:.1f}%\n"
        f"Capital range: {stats.min_capital:.2f} - {stats.max_capital:.2f}\n"
        f"ROI: {stats.roi:.2f}%"
    )
    return Panel(body, title=title, expand=False)


def _ranking_table(ranking: RankingResult, title: str) -> Table:
    table = Table(title=f"{title} ({ranking.market.value})")
    table.add_column("#", justify="right")
    table.add_column("Team")
    table.add_column("Matches", justify="right")
    for position, (team, count) in enumerate(zip(ranking.labels, ranking.values), start=1):
        table.add_row(str(position), team, str(count))
    return table


def run_command(args: argparse.Namespace, records: List[MatchRecord]) -> Dict[str, Any]:
    """Executes one CLI command, prints its report and returns the JSON payload."""
    roster = load_roster(settings.roster_file)

    if args.command == "invest":
        request = InvestmentRequest(
            starting_capital=args.capital,
            stake_percentage=args.stake,
            season=args.season,
            season_mode=args.season_mode,
            league=args.league,
            market=args.market,
            t9_teams_active=args.t9,
            outcome_rule=args.rule,
        )
        result = run_investment(records, request, roster)
        print(_stats_panel(result.stats, f"{args.market} - {args.league}"))
        return result.to_payload()

    if args.command == "backtest":
        request = BacktestRequest(
            selected_teams=args.teams,
            market=args.market,
            season=args.season,
            starting_capital=args.capital,
            stake_percentage=args.stake,
            outcome_rule=args.rule,
        )
        result = run_backtest(records, request)
        print(_stats_panel(result.stats, f"{args.market} - {len(args.teams)} teams"))
        return result.to_payload()

    if args.command == "rank":
        pair = compute_rankings(
            records,
            args.league,
            args.season,
            MarketType(args.market),
            args.t9,
            roster,
            season_mode=SeasonMode(args.season_mode),
            limit=settings.ranking_limit,
        )
        print(_ranking_table(pair.selected_market_ranking, "Selected market"))
        print(_ranking_table(pair.opposite_market_ranking, "Opposite market"))
        return {"success": True, **pair.to_payload()}

    if args.command == "filters":
        options = filter_options(records, roster)
        print(
            Panel(
                f"Seasons: {', '.join(options.seasons) or '-'}\n"
                f"Leagues: {', '.join(options.leagues) or '-'}\n"
                f"T9 leagues: {', '.join(options.t9_teams) or '-'}",
                title="Filters",
                expand=False,
            )
        )
        return {"success": True, **options.to_payload()}

    if args.command == "markets":
        markets = analyze_league_markets(records)
        table = Table(title="League markets")
        for column in ("League", "Market", "Games", "Win rate", "ROI", "Income"):
            table.add_column(column)
        for m in markets:
            table.add_row(
                m.league,
                m.strategy.value,
                str(m.total_games),
                f"{m.win_rate:.1f}%",
                f"{m.roi:.2f}%",
                f"{m.income:.2f}",
            )
        print(table)
        return {"success": True, "markets": [m.to_payload() for m in markets]}

    popularity = team_popularity(records, args.season)
    payload = {
        league: {team: profile.to_payload() for team, profile in teams.items()}
        for league, teams in popularity.items()
    }
    print(
        Panel(
            "\n".join(f"{league}: {len(teams)} teams" for league, teams in payload.items())
            or "No teams",
            title="Team popularity",
            expand=False,
        )
    )
    return {
        "success": True,
        "teamPopularity": payload,
        "totalTeams": sum(len(teams) for teams in payload.values()),
    }


def _write_output(payload: Dict[str, Any], output_filename: str) -> None:
    try:
        with open(output_filename, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=4, ensure_ascii=False)
        logger.success(f"Saved payload to {output_filename}")
    except IOError as e:
        logger.error(f"Failed to write payload to {output_filename}: {e}")


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    logger.info(f"Starting goals backtest - command '{args.command}'")

    source = build_source(
        args.source, token=settings.data_source_token, timeout=settings.http_timeout
    )
    try:
        records = await load_records(source)
    except (DataSourceError, NormalizationError) as e:
        logger.error(f"Could not load match data from {args.source}: {e}")
        return 1

    try:
        payload = run_command(args, records)
    except SelectionError as e:
        logger.error(f"Invalid selection: {e}")
        return 2
    except ValidationError as e:
        logger.error(f"Invalid parameters: {e}")
        return 2
    except RosterError as e:
        logger.error(f"Roster configuration error: {e}")
        return 1

    if args.output:
        _write_output(payload, args.output)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
