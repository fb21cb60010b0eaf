"""
FastAPI dependencies for the Q-sort endpoints.

Override these in `app.dependency_overrides` to point the API at another
workbook or submission store.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from qsortsurvey.config import settings
from qsortsurvey.db.database import async_session_factory
from qsortsurvey.services.query import QueryService
from qsortsurvey.services.recorder import (
    CsvSubmissionRepository,
    DatabaseSubmissionRepository,
    SubmissionRecorder,
    SubmissionRepository,
)
from qsortsurvey.sources.spreadsheet import SpreadsheetSource


def get_query_service() -> QueryService:
    """Query service over the configured workbook (re-read on every request)."""
    return QueryService(SpreadsheetSource(settings.details_path))


@lru_cache(maxsize=1)
def get_submission_repository() -> SubmissionRepository:
    """
    The configured submission store.

    Cached so every request shares one repository and therefore one write lock.
    """
    if settings.submission_backend == "database":
        return DatabaseSubmissionRepository(async_session_factory)
    return CsvSubmissionRepository(settings.submissions_path)


def get_recorder(
    repository: Annotated[SubmissionRepository, Depends(get_submission_repository)],
) -> SubmissionRecorder:
    return SubmissionRecorder(repository)
