"""Tests for submission recording and the submission repositories."""

import asyncio
import threading
from itertools import groupby
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from qsortsurvey.models.card import Card
from qsortsurvey.models.db import Base
from qsortsurvey.models.failure import PersistenceError, ValidationError
from qsortsurvey.models.submission import Placement, Submission, SubmissionRecord
from qsortsurvey.services.recorder import (
    CsvSubmissionRepository,
    DatabaseSubmissionRepository,
    SubmissionRecorder,
    SubmissionRepository,
    extract_project_name,
)
from qsortsurvey.services.sort_session import SortSession


def make_submission(name: str = "Alice", version: str = "V1") -> Submission:
    return Submission(
        user_name=name,
        version=version,
        placements=[
            Placement(column=2, card="Sunfield - 150MW (Solar)"),
            Placement(column=1, card="Windy Ridge - 80MW (Wind)"),
        ],
    )


@pytest.fixture
async def async_engine(tmp_path: Path):
    """Create a file-backed SQLite engine for testing."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(params=["csv", "database"])
async def repository(request, tmp_path: Path, async_engine) -> SubmissionRepository:
    if request.param == "csv":
        return CsvSubmissionRepository(tmp_path / "qsort_data.csv")
    return DatabaseSubmissionRepository(
        async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    )


class TestExtractProjectName:
    def test_text_before_first_dash(self) -> None:
        assert extract_project_name("Sunfield - 150MW (Solar)") == "Sunfield"

    def test_no_dash_keeps_whole_text(self) -> None:
        assert extract_project_name("  Sunfield  ") == "Sunfield"

    def test_only_first_dash_splits(self) -> None:
        assert extract_project_name("North-East - 10MW (Wind)") == "North"


class TestSubmissionNumbering:
    async def test_first_submission_is_one(self, repository: SubmissionRepository) -> None:
        recorder = SubmissionRecorder(repository)
        assert await recorder.record(make_submission()) == 1

    async def test_resubmission_increments(self, repository: SubmissionRepository) -> None:
        recorder = SubmissionRecorder(repository)
        await recorder.record(make_submission())

        assert await recorder.record(make_submission()) == 2

    async def test_other_user_starts_at_one(self, repository: SubmissionRepository) -> None:
        recorder = SubmissionRecorder(repository)
        await recorder.record(make_submission("Alice"))
        await recorder.record(make_submission("Alice"))

        assert await recorder.record(make_submission("Bob")) == 1

    async def test_other_version_starts_at_one(self, repository: SubmissionRepository) -> None:
        recorder = SubmissionRecorder(repository)
        await recorder.record(make_submission("Alice", "V1"))

        assert await recorder.record(make_submission("Alice", "V2")) == 1

    async def test_one_record_per_placement(self, repository: SubmissionRepository) -> None:
        recorder = SubmissionRecorder(repository)
        await recorder.record(make_submission())
        await recorder.record(make_submission())

        records = await repository.records()

        assert len(records) == 4
        assert records[0] == SubmissionRecord("Alice", "V1", 1, 2, "Sunfield")
        assert records[1] == SubmissionRecord("Alice", "V1", 1, 1, "Windy Ridge")
        assert {r.submit_number for r in records[2:]} == {2}

    async def test_store_is_available(self, repository: SubmissionRepository) -> None:
        assert await repository.is_available() is True


class TestConcurrentSubmissions:
    async def test_numbers_are_distinct_and_rows_contiguous(
        self, repository: SubmissionRepository
    ) -> None:
        recorder = SubmissionRecorder(repository)

        numbers = await asyncio.gather(*(recorder.record(make_submission()) for _ in range(10)))

        assert sorted(numbers) == list(range(1, 11))
        records = await repository.records()
        assert len(records) == 20
        # Each submission's rows form exactly one run
        runs = [
            (number, len(list(rows)))
            for number, rows in groupby(records, key=lambda r: r.submit_number)
        ]
        assert sorted(runs) == [(n, 2) for n in range(1, 11)]


class TestRecorderValidation:
    @pytest.mark.parametrize(
        "submission",
        [
            Submission(user_name="  ", version="V1", placements=[Placement(1, "A - 1MW (Solar)")]),
            Submission(user_name="Alice", version="", placements=[Placement(1, "A - 1MW (Solar)")]),
            Submission(user_name="Alice", version="V1", placements=[]),
        ],
    )
    async def test_rejects_incomplete_submission(
        self, tmp_path: Path, submission: Submission
    ) -> None:
        repository = CsvSubmissionRepository(tmp_path / "qsort_data.csv")

        with pytest.raises(ValidationError):
            await SubmissionRecorder(repository).record(submission)
        assert await repository.records() == []


class TestCsvSubmissionRepository:
    async def test_header_matches_record_fields(self, tmp_path: Path) -> None:
        path = tmp_path / "qsort_data.csv"
        await SubmissionRecorder(CsvSubmissionRepository(path)).record(make_submission())

        lines = path.read_text(encoding="utf-8").splitlines()

        assert lines[0] == "name,version,submit_number,column,project_name"
        assert lines[1] == "Alice,V1,1,2,Sunfield"
        assert len(lines) == 3

    async def test_header_written_once(self, tmp_path: Path) -> None:
        path = tmp_path / "qsort_data.csv"
        recorder = SubmissionRecorder(CsvSubmissionRepository(path))
        await recorder.record(make_submission())
        await recorder.record(make_submission())

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines.count("name,version,submit_number,column,project_name") == 1

    async def test_names_with_commas_are_quoted(self, tmp_path: Path) -> None:
        path = tmp_path / "qsort_data.csv"
        repository = CsvSubmissionRepository(path)
        recorder = SubmissionRecorder(repository)
        await recorder.record(make_submission("Smith, Jo"))

        assert await recorder.record(make_submission("Smith, Jo")) == 2
        assert (await repository.records())[0].name == "Smith, Jo"

    async def test_numbering_survives_new_repository(self, tmp_path: Path) -> None:
        path = tmp_path / "qsort_data.csv"
        await SubmissionRecorder(CsvSubmissionRepository(path)).record(make_submission())

        recorder = SubmissionRecorder(CsvSubmissionRepository(path))
        assert await recorder.record(make_submission()) == 2

    async def test_write_failure_raises_persistence_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        repository = CsvSubmissionRepository(blocker / "qsort_data.csv")

        with pytest.raises(PersistenceError) as exc_info:
            await SubmissionRecorder(repository).record(make_submission())
        assert exc_info.value.status_code == 500

    async def test_file_io_runs_off_event_loop(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        repository = CsvSubmissionRepository(tmp_path / "qsort_data.csv")
        write = repository._write
        threads: list[int] = []

        def tracking_write(records: list[SubmissionRecord]) -> None:
            threads.append(threading.get_ident())
            write(records)

        monkeypatch.setattr(repository, "_write", tracking_write)
        await SubmissionRecorder(repository).record(make_submission())

        assert len(threads) == 1
        assert threads[0] != threading.get_ident()
        assert len(await repository.records()) == 2

    async def test_malformed_rows_are_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "qsort_data.csv"
        path.write_text(
            "name,version,submit_number,column,project_name\n"
            "Alice,V1,1,2,Sunfield\n"
            "Alice,V1,oops,1,Windy Ridge\n"
            "Alice,V1,1\n",
            encoding="utf-8",
        )
        repository = CsvSubmissionRepository(path)

        assert await repository.records() == [SubmissionRecord("Alice", "V1", 1, 2, "Sunfield")]
        assert await SubmissionRecorder(repository).record(make_submission()) == 2

    async def test_unavailable_when_directory_missing(self, tmp_path: Path) -> None:
        repository = CsvSubmissionRepository(tmp_path / "missing" / "qsort_data.csv")
        assert await repository.is_available() is False


class TestSessionSubmission:
    async def test_completed_session_is_recorded(self, tmp_path: Path) -> None:
        session = SortSession()
        session.load("1", "V1", [Card(id=f"P{i}", text=f"P{i} - {i}MW (Solar)") for i in range(4)])
        assert session.layout is not None
        for card, slot in zip(session.cards, session.layout.slots, strict=True):
            session.place_card(card.id, slot)

        repository = CsvSubmissionRepository(tmp_path / "qsort_data.csv")
        number = await SubmissionRecorder(repository).record(session.try_submit("Alice"))
        session.clear()

        assert number == 1
        records = await repository.records()
        assert [(r.column, r.project_name) for r in records] == [
            (2, "P0"),
            (1, "P1"),
            (2, "P2"),
            (3, "P3"),
        ]
        assert session.unplaced_count == 4
