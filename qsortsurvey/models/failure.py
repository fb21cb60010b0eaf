"""
Known failures for the Q-sort service.

Every failure the service can explain is raised as a `KnownError` subclass.
The API layer turns these into error responses with the status code carried
by the exception; anything else is an unknown failure and propagates.

Taxonomy:
- DataSourceError: the spreadsheet or one of its tables is missing
- SchemaError: a table is missing a required column
- ValidationError: bad request parameters or an incomplete sort
- PersistenceError: a submission could not be appended
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Source data failures
    SOURCE_MISSING = "source_missing"
    SCHEMA_MISMATCH = "schema_mismatch"

    # Caller-correctable failures
    MISSING_REQUIRED = "missing_required"
    INCOMPLETE_SORT = "incomplete_sort"
    INVALID_INPUT = "invalid_input"

    # Storage failures
    PERSISTENCE_FAILED = "persistence_failed"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)


class DataSourceError(KnownError):
    """Raised when the workbook or one of its sheets cannot be found."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.SOURCE_MISSING,
            message=message,
            detail=detail,
            status_code=500,
        )


class SchemaError(KnownError):
    """Raised when a sheet lacks a column the service depends on."""

    def __init__(self, sheet: str, missing: list[str]):
        self.sheet = sheet
        self.missing = missing
        super().__init__(
            kind=FailureKind.SCHEMA_MISMATCH,
            message=f"Sheet '{sheet}' is missing required columns: {', '.join(missing)}",
            status_code=500,
        )


class ValidationError(KnownError):
    """
    Raised for caller-correctable problems.

    Missing parameters, a blank participant name, or a sort that still has
    cards in the parking lot. `unplaced` carries the number of cards left
    when the sort is incomplete.
    """

    def __init__(
        self,
        message: str,
        kind: FailureKind = FailureKind.MISSING_REQUIRED,
        unplaced: int = 0,
        detail: str | None = None,
    ):
        self.unplaced = unplaced
        super().__init__(kind=kind, message=message, detail=detail, status_code=400)


class PersistenceError(KnownError):
    """Raised when a submission cannot be written to the store."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.PERSISTENCE_FAILED,
            message="Failed to save submission",
            detail=detail,
            status_code=500,
        )
