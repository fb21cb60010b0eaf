"""Tests for submission backend selection."""

from pathlib import Path

import pytest

from qsortsurvey.api.dependencies import get_submission_repository
from qsortsurvey.config import settings
from qsortsurvey.db.database import async_session_factory
from qsortsurvey.services.recorder import CsvSubmissionRepository, DatabaseSubmissionRepository


@pytest.fixture(autouse=True)
def fresh_repository():
    get_submission_repository.cache_clear()
    yield
    get_submission_repository.cache_clear()


class TestSubmissionRepository:
    def test_csv_backend(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr(settings, "submission_backend", "csv")
        monkeypatch.setattr(settings, "submissions_path", tmp_path / "qsort_data.csv")

        repository = get_submission_repository()

        assert isinstance(repository, CsvSubmissionRepository)
        assert repository.path == tmp_path / "qsort_data.csv"

    def test_database_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "submission_backend", "database")

        repository = get_submission_repository()

        assert isinstance(repository, DatabaseSubmissionRepository)
        assert repository.session_factory is async_session_factory

    def test_repository_is_shared(self) -> None:
        assert get_submission_repository() is get_submission_repository()
