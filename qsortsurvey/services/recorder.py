"""
Submission recording.

A submission is stored as one record per placed card:
(name, version, submit_number, column, project_name). The submit number
counts a user's submissions for one version, starting at 1, so sorting the
same version again adds a new set of rows instead of overwriting the old one.

Storage sits behind SubmissionRepository. Each repository serializes its
appends with a lock, so the submit number and the rows of one submission are
computed and written without another submission interleaving.
"""

import asyncio
import csv
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from qsortsurvey.db.operations import (
    add_submission_records,
    get_last_submit_number,
    get_submission_records,
    submission_record_to_model,
)
from qsortsurvey.models.failure import PersistenceError, ValidationError
from qsortsurvey.models.submission import RECORD_FIELDS, Submission, SubmissionRecord

logger = logging.getLogger(__name__)


def extract_project_name(card_text: str) -> str:
    """Project name portion of a card's text: everything before the first "-"."""
    return card_text.split("-", 1)[0].strip()


def build_records(
    name: str, version: str, submit_number: int, entries: Sequence[tuple[int, str]]
) -> list[SubmissionRecord]:
    return [
        SubmissionRecord(
            name=name,
            version=version,
            submit_number=submit_number,
            column=column,
            project_name=project,
        )
        for column, project in entries
    ]


class SubmissionRepository(ABC):
    """Append-only store of submission records."""

    @abstractmethod
    async def append(self, name: str, version: str, entries: Sequence[tuple[int, str]]) -> int:
        """
        Store one submission and return its submit number.

        Args:
            name: Participant name
            version: Sorted version
            entries: (column, project name) per placed card

        Raises:
            PersistenceError: If the records cannot be written
        """

    @abstractmethod
    async def records(self) -> list[SubmissionRecord]:
        """Every stored record, oldest first."""

    @abstractmethod
    async def is_available(self) -> bool:
        """True if the store can currently accept writes."""


class CsvSubmissionRepository(SubmissionRepository):
    """
    Submissions appended to a CSV file.

    The file starts with a header row naming the five record fields.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _last_submit_number(self, name: str, version: str) -> int:
        if not self.path.exists():
            return 0

        last = 0
        with open(self.path, encoding="utf-8", newline="") as f:
            for row in csv.DictReader(f):
                if row.get("name") != name or row.get("version") != version:
                    continue
                try:
                    last = max(last, int(row.get("submit_number") or 0))
                except ValueError:
                    logger.warning("Ignoring malformed submit number in %s: %r", self.path, row)
        return last

    def _write(self, records: list[SubmissionRecord]) -> None:
        write_header = not self.path.exists() or self.path.stat().st_size == 0
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.path, "a", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            if write_header:
                writer.writerow(RECORD_FIELDS)
            writer.writerows(
                (r.name, r.version, r.submit_number, r.column, r.project_name) for r in records
            )

    async def append(self, name: str, version: str, entries: Sequence[tuple[int, str]]) -> int:
        async with self._lock:
            try:
                # Blocking file IO runs in a worker thread while the lock is held
                last = await asyncio.to_thread(self._last_submit_number, name, version)
                submit_number = last + 1
                records = build_records(name, version, submit_number, entries)
                await asyncio.to_thread(self._write, records)
            except OSError as e:
                logger.error("Error saving Q-sort submission to %s: %s", self.path, e)
                raise PersistenceError(detail=str(e)) from e
        return submit_number

    def _read_records(self) -> list[SubmissionRecord]:
        if not self.path.exists():
            return []

        records = []
        with open(self.path, encoding="utf-8", newline="") as f:
            for row in csv.DictReader(f):
                try:
                    records.append(
                        SubmissionRecord(
                            name=row["name"],
                            version=row["version"],
                            submit_number=int(row["submit_number"]),
                            column=int(row["column"]),
                            project_name=row["project_name"],
                        )
                    )
                except (KeyError, TypeError, ValueError):
                    logger.warning("Ignoring malformed record in %s: %r", self.path, row)
        return records

    async def records(self) -> list[SubmissionRecord]:
        return await asyncio.to_thread(self._read_records)

    async def is_available(self) -> bool:
        parent = self.path.parent
        return parent.is_dir() and (not self.path.exists() or self.path.is_file())


class DatabaseSubmissionRepository(SubmissionRepository):
    """Submissions stored in the submission_records table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self._lock = asyncio.Lock()

    async def append(self, name: str, version: str, entries: Sequence[tuple[int, str]]) -> int:
        async with self._lock:
            try:
                async with self.session_factory() as session:
                    submit_number = await get_last_submit_number(session, name, version) + 1
                    await add_submission_records(
                        session, build_records(name, version, submit_number, entries)
                    )
                    await session.commit()
            except SQLAlchemyError as e:
                logger.error("Error saving Q-sort submission to database: %s", e)
                raise PersistenceError(detail=type(e).__name__) from e
        return submit_number

    async def records(self) -> list[SubmissionRecord]:
        async with self.session_factory() as session:
            rows = await get_submission_records(session)
            return [submission_record_to_model(row) for row in rows]

    async def is_available(self) -> bool:
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False


class SubmissionRecorder:
    """Validates a finished sort and hands it to the repository."""

    def __init__(self, repository: SubmissionRepository):
        self.repository = repository

    async def record(self, submission: Submission) -> int:
        """
        Persist a submission.

        Returns:
            The submission's sequence number for this user + version.

        Raises:
            ValidationError: If name or version is blank or nothing was placed
            PersistenceError: If the repository cannot store the records
        """
        name = submission.user_name.strip()
        version = submission.version.strip()
        if not name or not version or not submission.placements:
            raise ValidationError("Missing required fields or empty submission")

        entries = [(p.column, extract_project_name(p.card)) for p in submission.placements]
        submit_number = await self.repository.append(name, version, entries)

        logger.info(
            "Saved submission %d for %s on version %s (%d cards)",
            submit_number,
            name,
            version,
            len(entries),
        )
        return submit_number
