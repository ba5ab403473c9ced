import logging
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.models.enums import OutcomeRule, SeasonMode


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Match data source
    data_source: str = Field(
        "data/MAINRAW.csv",
        description="Path or http(s) URL of the match sheet CSV.",
    )
    data_source_token: Optional[str] = Field(
        None, description="Bearer token sent when the data source is a URL."
    )
    http_timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds.")

    # T9 roster table (JSON object league -> team list); built-in table when unset
    roster_file: Optional[Path] = Field(
        None, description="Path to a JSON roster table overriding the built-in one."
    )

    # Simulation defaults
    starting_capital: float = Field(
        1000.0, gt=0, description="Capital before the first trade."
    )
    stake_percentage: float = Field(
        5.0,
        ge=0,
        le=100,
        description="Share of the starting capital staked on every trade (e.g., 5 for 5%).",
    )
    season_mode: SeasonMode = Field(
        SeasonMode.EXACT,
        description="How the investment calculator applies the season filter.",
    )
    outcome_rule: OutcomeRule = Field(
        OutcomeRule.THRESHOLD,
        description="How over/under 2.5 outcomes are decided (threshold or flag).",
    )
    ranking_limit: int = Field(30, gt=0, description="Teams returned per ranking.")

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
