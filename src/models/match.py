from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class MatchRecord(BaseModel):
    """A single historical match row after normalization."""

    model_config = ConfigDict(frozen=True)  # Records never change once normalized

    season: str = ""
    league: str = ""
    home_team: str = ""
    away_team: str = ""
    trade_id: str = ""

    # Derived once by the Normalizer
    trade_number: Optional[int] = None  # None when the trade id is unusable
    total_goals: Optional[float] = None  # None when no goal column resolves

    # Decimal odds per market, 0 when missing
    odd: Decimal = Decimal(0)  # over2.5
    odd2: Decimal = Decimal(0)  # under2.5
    odd3: Decimal = Decimal(0)  # under6 (grouped)

    # Every coerced input column, passed through untouched
    fields: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("fields")
    @classmethod
    def freeze_fields(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(v))

    @field_serializer("fields")
    def serialize_fields(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(fields)

    def get(self, column: str, default: Any = None) -> Any:
        return self.fields.get(column, default)

    def team_keys(self) -> tuple:
        """`League:Team` keys for both sides, as used by team selections."""
        return (f"{self.league}:{self.home_team}", f"{self.league}:{self.away_team}")
