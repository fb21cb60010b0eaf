"""
SQLAlchemy ORM models for persistent storage.

Mirrors the SubmissionRecord dataclass for the database submission backend.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class SubmissionRecordDB(Base):
    """
    One placed card of a submitted Q-sort.

    A submission is the set of rows sharing name, version and submit_number.
    Rows are only ever inserted.
    """

    __tablename__ = "submission_records"
    __table_args__ = (Index("ix_submission_user_version", "name", "version"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    version: Mapped[str] = mapped_column(String(255))
    submit_number: Mapped[int] = mapped_column(Integer)
    column: Mapped[int] = mapped_column(Integer)
    project_name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return (
            f"<SubmissionRecordDB(name={self.name}, version={self.version}, "
            f"submit={self.submit_number}, column={self.column})>"
        )
