from qsortsurvey.models.card import Card, QSortOverview
from qsortsurvey.models.failure import (
    DataSourceError,
    FailureKind,
    KnownError,
    PersistenceError,
    SchemaError,
    ValidationError,
)
from qsortsurvey.models.slot import PyramidLayout, Slot
from qsortsurvey.models.submission import (
    RECORD_FIELDS,
    Placement,
    Submission,
    SubmissionRecord,
)

__all__ = [
    "Card",
    "DataSourceError",
    "FailureKind",
    "KnownError",
    "PersistenceError",
    "Placement",
    "PyramidLayout",
    "QSortOverview",
    "RECORD_FIELDS",
    "SchemaError",
    "Slot",
    "Submission",
    "SubmissionRecord",
    "ValidationError",
]
