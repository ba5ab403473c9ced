from typing import List, Optional, Sequence, Tuple, Union

from loguru import logger

from src.models.enums import MarketType, Outcome, OutcomeRule
from src.models.match import MatchRecord
from src.models.trade import TradeEntry

GROUP_SIZE = 3  # Fixtures per under6 trade
UNDER6_LIMIT = 6

# Precomputed result columns trusted by OutcomeRule.FLAG
UNDER25_FLAG_COLUMN = "Under2.5"
OVER25_FLAG_COLUMN = "over2.5goals"


def stake_amount(starting_capital: float, stake_percentage: float) -> float:
    """Fixed per-trade stake; it does not follow the running capital."""
    return starting_capital * stake_percentage / 100


def trade_profit(stake: float, is_win: bool, odds: float) -> float:
    """A win pays stake * (odds - 1); a loss, or a win without usable odds, costs the stake."""
    if is_win and odds > 0:
        return stake * (odds - 1)
    return -stake


def is_market_win(market: MarketType, total_goals: Optional[float]) -> bool:
    """Single-fixture win test on a goal total; unresolved totals never win."""
    if total_goals is None:
        return False
    if market == MarketType.OVER_25:
        return total_goals > 2
    if market == MarketType.UNDER_25:
        return total_goals <= 2
    return total_goals < UNDER6_LIMIT


def _flag_is(value, expected: int) -> bool:
    return value == expected or value == str(expected)


def _standard_outcome(
    record: MatchRecord, market: MarketType, rule: OutcomeRule
) -> Tuple[bool, float]:
    """Returns (is_win, odds) for over2.5 / under2.5."""
    odds = float(record.odd if market == MarketType.OVER_25 else record.odd2)

    if rule == OutcomeRule.FLAG:
        if market == MarketType.OVER_25:
            return _flag_is(record.get(OVER25_FLAG_COLUMN), 0), odds
        return _flag_is(record.get(UNDER25_FLAG_COLUMN), 1), odds

    if record.total_goals is None:
        return False, 0.0
    return is_market_win(market, record.total_goals), odds


def _simulate_standard(
    records: Sequence[MatchRecord],
    stake: float,
    starting_capital: float,
    market: MarketType,
    rule: OutcomeRule,
) -> List[TradeEntry]:
    entries: List[TradeEntry] = []
    capital = starting_capital
    for index, record in enumerate(records, start=1):
        is_win, odds = _standard_outcome(record, market, rule)
        profit = trade_profit(stake, is_win, odds)
        capital += profit
        entries.append(
            TradeEntry(
                sequence_number=index,
                trade_id=record.trade_id,
                stake=stake,
                outcome=Outcome.WIN if is_win else Outcome.LOSS,
                profit=profit,
                capital_after=capital,
                market_type=market,
                odds_used=odds,
                total_goals=record.total_goals,
                record=record,
                group=(record,),
            )
        )
    return entries


def _simulate_grouped(
    records: Sequence[MatchRecord], stake: float, starting_capital: float
) -> List[TradeEntry]:
    entries: List[TradeEntry] = []
    capital = starting_capital
    complete = len(records) - len(records) % GROUP_SIZE
    if complete < len(records):
        logger.debug(
            f"Discarding {len(records) - complete} trailing fixture(s) outside a full group."
        )

    for start in range(0, complete, GROUP_SIZE):
        group = tuple(records[start : start + GROUP_SIZE])
        representative = group[0]
        is_win = all(
            is_market_win(MarketType.UNDER_6, member.total_goals) for member in group
        )
        odds = float(representative.odd3)
        profit = trade_profit(stake, is_win, odds)
        capital += profit
        sequence_number = len(entries) + 1
        entries.append(
            TradeEntry(
                sequence_number=sequence_number,
                trade_id=f"t{sequence_number}",
                stake=stake,
                outcome=Outcome.WIN if is_win else Outcome.LOSS,
                profit=profit,
                capital_after=capital,
                market_type=MarketType.UNDER_6,
                odds_used=odds,
                total_goals=representative.total_goals,
                record=representative,
                group=group,
            )
        )
    return entries


def simulate(
    records: Sequence[MatchRecord],
    starting_capital: float,
    stake_percentage: float,
    market: Union[MarketType, str],
    rule: Union[OutcomeRule, str] = OutcomeRule.THRESHOLD,
) -> List[TradeEntry]:
    """
    Replays an ordered record sequence as fixed-stake trades.

    Args:
        records: Filtered records, already in trade order.
        starting_capital: Capital before the first trade.
        stake_percentage: Share of the starting capital risked on every trade (0-100).
        market: over2.5 / under2.5 (one trade per record) or under6 (one trade
            per consecutive group of three; a trailing partial group is dropped).
        rule: How over2.5 / under2.5 outcomes are decided. Ignored for under6.

    Returns:
        TradeEntries in order, each carrying the capital after its own profit.
    """
    market = MarketType(market)
    rule = OutcomeRule(rule)
    stake = stake_amount(starting_capital, stake_percentage)

    if market == MarketType.UNDER_6:
        entries = _simulate_grouped(records, stake, starting_capital)
    else:
        entries = _simulate_standard(records, stake, starting_capital, market, rule)

    logger.debug(
        f"Simulated {len(entries)} {market.value} trades from {len(records)} records "
        f"(stake {stake:.2f}, rule {rule.value})."
    )
    return entries
