from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, computed_field

from .enums import MarketType, Outcome
from .match import MatchRecord


class TradeEntry(BaseModel):
    """One simulated stake: a single fixture, or a group of three for under6."""

    model_config = ConfigDict(frozen=True)

    sequence_number: int  # 1-based, re-assigned on every simulation run
    trade_id: str  # Original id for single-fixture markets, t<n> for groups
    stake: float
    outcome: Outcome
    profit: float
    capital_after: float
    market_type: MarketType
    odds_used: float
    total_goals: Optional[float] = None
    record: MatchRecord  # Representative fixture (first member of a group)
    group: Tuple[MatchRecord, ...] = ()

    @computed_field  # type: ignore[misc]
    @property
    def is_win(self) -> bool:
        return self.outcome == Outcome.WIN

    def to_payload(self) -> Dict[str, Any]:
        """Original record columns merged with the trade fields."""
        payload = dict(self.record.fields)
        payload.update(
            {
                "Trade": self.trade_id,
                "tradeNumber": self.record.trade_number,
                "stake": self.stake,
                "isWin": self.is_win,
                "outcome": self.outcome.value,
                "profit": self.profit,
                "capitalMovement": self.capital_after,
                "gameNumber": self.sequence_number,
                "marketType": self.market_type.value,
                "oddsUsed": self.odds_used,
            }
        )
        return payload
