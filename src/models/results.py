from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import MarketType
from .trade import TradeEntry


class PayloadModel(BaseModel):
    """Base for result models handed to external consumers (camelCase on dump)."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class StatsSummary(PayloadModel):
    total_games: int
    final_capital: float
    total_return: float
    win_rate: float  # 0-100
    max_capital: float
    min_capital: float
    roi: float  # Percentage of starting capital


class ChartPoint(PayloadModel):
    x: int  # Trade sequence number
    y: float  # Capital after the trade


class RankingResult(PayloadModel):
    market: MarketType
    labels: List[str] = Field(default_factory=list)
    values: List[int] = Field(default_factory=list)


class RankingPair(PayloadModel):
    selected_market_ranking: RankingResult
    opposite_market_ranking: RankingResult


class InvestmentResult(PayloadModel):
    processed_data: List[TradeEntry]
    stats: StatsSummary
    chart_data: List[ChartPoint]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "success": True,
            "processedData": [entry.to_payload() for entry in self.processed_data],
            "stats": self.stats.to_payload(),
            "chartData": [point.to_payload() for point in self.chart_data],
        }


class BacktestResult(PayloadModel):
    processed_data: List[TradeEntry]
    stats: StatsSummary
    total_games: int
    selected_teams_count: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "success": True,
            "processedData": [entry.to_payload() for entry in self.processed_data],
            "stats": self.stats.to_payload(),
            "totalGames": self.total_games,
            "selectedTeamsCount": self.selected_teams_count,
        }


class FilterOptions(PayloadModel):
    seasons: List[str]
    leagues: List[str]
    t9_teams: Dict[str, List[str]]


class TeamMarketProfile(PayloadModel):
    """How often one team's matches landed in each goals market."""

    over25_percentage: float
    under25_percentage: float
    under6_percentage: float
    total_matches: int
    valid_matches: int
    over25_count: int
    under25_count: int
    under6_count: int


class LeagueMarketPerformance(PayloadModel):
    id: str
    league: str
    strategy: MarketType
    wins: int
    losses: int
    total_games: int
    win_rate: float
    roi: float
    income: float
    final_capital: float
