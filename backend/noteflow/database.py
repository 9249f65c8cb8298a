"""
NoteFlow Backend — Database
=============================

What:  Async engine, session factory, declarative Base and the per-request
       session dependency used by /notes and /auth.
How:   SQLAlchemy 2.0 asyncio over asyncpg. The engine is built at import
       time but does not connect until first use, so importing the app
       needs no running database.

The AI routes never open a session: a database outage leaves
summarize/generate/improve/answer/tags working.

Pool: DB_POOL_SIZE persistent connections plus DB_MAX_OVERFLOW burst
connections; pre-ping discards connections the server has dropped;
connections are recycled hourly.
"""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from noteflow.config import settings

POOL_RECYCLE_SECONDS = 3600

engine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=settings.db_pool_pre_ping,
    pool_recycle=POOL_RECYCLE_SECONDS,
    echo=settings.log_level == "DEBUG",
)

# Routes serialize ORM objects after the dependency commits
async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


class Base(DeclarativeBase):
    """Declarative base shared by User and Note (and Alembic autogenerate)."""


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency: one session per request.

    Commits when the handler returns, rolls back if it raises.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    await engine.dispose()
