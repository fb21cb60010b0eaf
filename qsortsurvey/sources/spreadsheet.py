"""
Spreadsheet data source.

Reads the survey workbook (Teams, Versions and Cards sheets) with pandas.
The workbook is re-read on every call; nothing is cached between requests,
so edits to the spreadsheet are visible immediately.

Every cell is normalized to text: surrounding whitespace is trimmed, blank
cells become "" and integral numbers lose their decimal part, so a numeric
team 5 and a text team " 5 " compare equal.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from qsortsurvey.models.failure import DataSourceError, SchemaError

logger = logging.getLogger(__name__)

# Sheet names
TEAMS_SHEET = "Teams"
VERSIONS_SHEET = "Versions"
CARDS_SHEET = "Cards"

# Column names
TEAM_NAME = "Team Name"
VERSION_NAME = "Version Name"
CARD_TEAM = "Team Name"
CARD_VERSION = "Version"
PROJECT_NAME = "Project Name"
CAPACITY_MW = "MW"
TECHNOLOGY = "Technology"


def normalize_value(value: Any) -> str:
    """Render a cell value as trimmed text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if pd.isna(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


@dataclass
class SheetTable:
    """A sheet's header and its non-blank rows as normalized records."""

    name: str
    columns: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)

    def require(self, *columns: str) -> None:
        """
        Ensure the sheet declares every column in `columns`.

        Raises:
            SchemaError: If any column is absent from the header
        """
        missing = [c for c in columns if c not in self.columns]
        if missing:
            logger.error("Sheet %s is missing columns %s", self.name, missing)
            raise SchemaError(self.name, missing)


def frame_to_table(name: str, frame: pd.DataFrame) -> SheetTable:
    """Convert a parsed sheet into a SheetTable, dropping blank rows."""
    columns = [normalize_value(c) for c in frame.columns]
    rows: list[dict[str, str]] = []
    for values in frame.itertuples(index=False, name=None):
        record = {col: normalize_value(v) for col, v in zip(columns, values, strict=True)}
        if any(record.values()):
            rows.append(record)
    return SheetTable(name=name, columns=columns, rows=rows)


class SpreadsheetSource:
    """Read-only access to the survey workbook."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self, *sheets: str) -> dict[str, SheetTable]:
        """
        Read the named sheets from disk.

        Args:
            sheets: Sheet names to load

        Returns:
            Dict mapping each sheet name to its table.

        Raises:
            DataSourceError: If the workbook or any requested sheet is missing
        """
        if not self.exists():
            logger.error("Workbook not found at %s", self.path)
            raise DataSourceError(f"Workbook not found: {self.path.name}")

        try:
            with pd.ExcelFile(self.path) as workbook:
                missing = [s for s in sheets if s not in workbook.sheet_names]
                if missing:
                    logger.error("Workbook %s is missing sheets %s", self.path, missing)
                    raise DataSourceError(
                        f"Missing required sheets: {', '.join(missing)}",
                        detail=f"Available: {', '.join(map(str, workbook.sheet_names))}",
                    )
                frames = {s: workbook.parse(s) for s in sheets}
        except DataSourceError:
            raise
        except Exception as e:
            logger.error("Failed to read workbook %s: %s", self.path, e)
            raise DataSourceError("Workbook could not be read", detail=str(e)) from e

        return {name: frame_to_table(name, frame) for name, frame in frames.items()}
