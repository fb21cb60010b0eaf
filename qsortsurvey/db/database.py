"""
Database engine and session management.

Provides the async SQLAlchemy engine and session factory. Both are built on
import whatever the submission backend, since the API dependencies import
this module. The engine opens no connection until a session is used, which
only happens when SUBMISSION_BACKEND is "database".
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from qsortsurvey.config import settings
from qsortsurvey.models.db import Base

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

# Session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """
    Initialize database tables.

    Creates all tables defined in the ORM models.
    Should be called once at application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
