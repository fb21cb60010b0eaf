"""
Q-sort services.

Query, layout, sort session and submission recording logic.
"""

from qsortsurvey.services.layout import layout, plan_rows
from qsortsurvey.services.query import QueryService
from qsortsurvey.services.recorder import (
    CsvSubmissionRepository,
    DatabaseSubmissionRepository,
    SubmissionRecorder,
    SubmissionRepository,
    extract_project_name,
)
from qsortsurvey.services.sort_session import SessionState, SortSession

__all__ = [
    "CsvSubmissionRepository",
    "DatabaseSubmissionRepository",
    "QueryService",
    "SessionState",
    "SortSession",
    "SubmissionRecorder",
    "SubmissionRepository",
    "extract_project_name",
    "layout",
    "plan_rows",
]
