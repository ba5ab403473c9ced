import csv
import io
import math
import re
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from loguru import logger

from src.models.match import MatchRecord
from src.normalization.goals import NUMBER_PATTERN, resolve_total_goals

# Column names of the source sheet
SEASON_COLUMN = "Season"
LEAGUE_COLUMN = "League"
HOME_TEAM_COLUMN = "HomeTeam"
AWAY_TEAM_COLUMN = "AwayTeam"
TRADE_COLUMN = "Trade"
ODDS_COLUMNS = ("odd", "odd2", "odd3")

LEADING_INT_PATTERN = re.compile(r"^[+-]?\d+")
LEADING_FLOAT_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

Cell = Union[str, int, float]


class NormalizationError(Exception):
    """Raised when input text cannot be split into rows at all."""

    pass


def coerce_cell(value: Any) -> Cell:
    """Empty stays empty, fully numeric text becomes a number, the rest stays text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    if not text or not NUMBER_PATTERN.match(text):
        return text
    if re.fullmatch(r"[+-]?\d+", text):
        return int(text)
    number = float(text)
    return number if math.isfinite(number) else text


def parse_trade_number(trade_id: Any) -> Optional[int]:
    """`t12` -> 12. Missing, unparseable or non-positive ids give None."""
    if trade_id is None or isinstance(trade_id, bool):
        return None
    text = str(trade_id).strip()
    if text.startswith("t"):
        text = text[1:]
    match = LEADING_INT_PATTERN.match(text)
    if not match:
        return None
    number = int(match.group(0))
    return number if number > 0 else None


def parse_odds(value: Any) -> Decimal:
    """Leading decimal of the value, or 0 when there is none."""
    if isinstance(value, bool) or value is None:
        return Decimal(0)
    if isinstance(value, (int, float)):
        return Decimal(str(value)) if math.isfinite(value) else Decimal(0)
    match = LEADING_FLOAT_PATTERN.match(str(value).strip())
    if not match:
        return Decimal(0)
    return Decimal(match.group(0))


def _label(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class Normalizer:
    """Turns raw tabular match rows into MatchRecord objects."""

    def parse_csv_text(self, csv_text: str) -> List[Dict[str, Cell]]:
        """Splits CSV text into rows of coerced cells keyed by header name.

        Blank lines are skipped; short rows are padded with empty cells.
        """
        if csv_text is None:
            raise NormalizationError("No CSV text supplied.")

        reader = csv.reader(io.StringIO(csv_text))
        try:
            headers = next(reader)
        except StopIteration:
            logger.warning("CSV text is empty, no rows to parse.")
            return []
        except csv.Error as e:
            raise NormalizationError(f"Could not read CSV header: {e}") from e

        headers = [header.strip().lstrip("\ufeff") for header in headers]
        rows: List[Dict[str, Cell]] = []
        try:
            for values in reader:
                if not any(value.strip() for value in values):
                    continue
                rows.append(
                    {
                        header: coerce_cell(values[index] if index < len(values) else "")
                        for index, header in enumerate(headers)
                    }
                )
        except csv.Error as e:
            raise NormalizationError(
                f"Malformed CSV near line {reader.line_num}: {e}"
            ) from e

        logger.debug(f"Parsed {len(rows)} CSV rows with {len(headers)} columns.")
        return rows

    def normalize_row(self, raw_row: Mapping[str, Any]) -> MatchRecord:
        fields = {str(key).strip(): coerce_cell(value) for key, value in raw_row.items()}
        trade_id = _label(fields.get(TRADE_COLUMN))
        return MatchRecord(
            season=_label(fields.get(SEASON_COLUMN)),
            league=_label(fields.get(LEAGUE_COLUMN)),
            home_team=_label(fields.get(HOME_TEAM_COLUMN)),
            away_team=_label(fields.get(AWAY_TEAM_COLUMN)),
            trade_id=trade_id,
            trade_number=parse_trade_number(trade_id),
            total_goals=resolve_total_goals(fields),
            **{column: parse_odds(fields.get(column)) for column in ODDS_COLUMNS},
            fields=fields,
        )

    def normalize(
        self, raw_rows: Union[str, Iterable[Mapping[str, Any]]]
    ) -> List[MatchRecord]:
        """Normalizes CSV text or already-read field maps into MatchRecords.

        Args:
            raw_rows: Either the raw CSV text or an iterable of column -> value maps.

        Returns:
            One MatchRecord per usable row, in input order.
        """
        if isinstance(raw_rows, str):
            raw_rows = self.parse_csv_text(raw_rows)

        records: List[MatchRecord] = []
        skipped = 0
        for raw_row in raw_rows:
            if not isinstance(raw_row, Mapping):
                logger.warning(f"Skipping non-mapping row of type {type(raw_row)}")
                skipped += 1
                continue
            records.append(self.normalize_row(raw_row))

        unresolved = sum(1 for record in records if record.total_goals is None)
        logger.info(
            f"Normalized {len(records)} match records "
            f"({skipped} skipped, {unresolved} without a goal total)."
        )
        return records
