from enum import Enum


# Sentinel season value meaning "no season restriction"
ALL_SEASONS = "all"


class MarketType(str, Enum):
    OVER_25 = "over2.5"
    UNDER_25 = "under2.5"
    UNDER_6 = "under6"  # Grouped market, settled on triplets of fixtures


class Outcome(str, Enum):
    WIN = "win"
    LOSS = "loss"


class SeasonMode(str, Enum):
    EXACT = "exact"  # Keep only the given season
    FROM = "from"  # Keep the given season and every later one (lexical order)


class OutcomeRule(str, Enum):
    THRESHOLD = "threshold"  # Recompute the outcome from total goals
    FLAG = "flag"  # Trust the precomputed result columns
