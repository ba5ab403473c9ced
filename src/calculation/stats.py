from typing import List, Sequence

from src.models.results import ChartPoint, StatsSummary
from src.models.trade import TradeEntry


def summarize(entries: Sequence[TradeEntry], starting_capital: float) -> StatsSummary:
    """Reduces a trade sequence to summary metrics."""
    if not entries:
        return StatsSummary(
            total_games=0,
            final_capital=starting_capital,
            total_return=0.0,
            win_rate=0.0,
            max_capital=starting_capital,
            min_capital=starting_capital,
            roi=0.0,
        )

    capitals = [entry.capital_after for entry in entries]
    total_games = len(entries)
    final_capital = capitals[-1]
    total_return = final_capital - starting_capital
    wins = sum(1 for entry in entries if entry.is_win)

    return StatsSummary(
        total_games=total_games,
        final_capital=final_capital,
        total_return=total_return,
        win_rate=100 * wins / total_games,
        max_capital=max(capitals),
        min_capital=min(capitals),
        roi=100 * total_return / starting_capital,
    )


def chart_points(entries: Sequence[TradeEntry]) -> List[ChartPoint]:
    """Sequence number -> capital pairs for the capital curve."""
    return [ChartPoint(x=entry.sequence_number, y=entry.capital_after) for entry in entries]
