"""
Database operations for submission records.

Inserts and reads only; submission rows are never updated or deleted.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from qsortsurvey.models.db import SubmissionRecordDB
from qsortsurvey.models.submission import SubmissionRecord


async def get_last_submit_number(session: AsyncSession, name: str, version: str) -> int:
    """
    Highest submit number stored for a user + version.

    Returns 0 if the user has never submitted this version.
    """
    result = await session.execute(
        select(func.max(SubmissionRecordDB.submit_number)).where(
            SubmissionRecordDB.name == name,
            SubmissionRecordDB.version == version,
        )
    )
    return result.scalar_one_or_none() or 0


async def add_submission_records(
    session: AsyncSession, records: list[SubmissionRecord]
) -> list[SubmissionRecordDB]:
    """Insert the rows of one submission."""
    rows = [
        SubmissionRecordDB(
            name=r.name,
            version=r.version,
            submit_number=r.submit_number,
            column=r.column,
            project_name=r.project_name,
        )
        for r in records
    ]
    session.add_all(rows)
    await session.flush()
    return rows


async def get_submission_records(
    session: AsyncSession, name: str | None = None, version: str | None = None
) -> list[SubmissionRecordDB]:
    """Stored rows in insertion order, optionally narrowed to a user and/or version."""
    query = select(SubmissionRecordDB).order_by(SubmissionRecordDB.id)
    if name is not None:
        query = query.where(SubmissionRecordDB.name == name)
    if version is not None:
        query = query.where(SubmissionRecordDB.version == version)
    result = await session.execute(query)
    return list(result.scalars().all())


def submission_record_to_model(row: SubmissionRecordDB) -> SubmissionRecord:
    """Convert a database row to a domain record."""
    return SubmissionRecord(
        name=row.name,
        version=row.version,
        submit_number=row.submit_number,
        column=row.column,
        project_name=row.project_name,
    )
