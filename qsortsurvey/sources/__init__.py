from qsortsurvey.sources.spreadsheet import (
    CARDS_SHEET,
    TEAMS_SHEET,
    VERSIONS_SHEET,
    SheetTable,
    SpreadsheetSource,
    normalize_value,
)

__all__ = [
    "CARDS_SHEET",
    "SheetTable",
    "SpreadsheetSource",
    "TEAMS_SHEET",
    "VERSIONS_SHEET",
    "normalize_value",
]
