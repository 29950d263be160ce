"""
Employees API — Database Engine Helpers
========================================

What:  Async SQLAlchemy engine/session factories and the declarative base.
How:   Unlike a module-level engine, every SQL backend builds and owns its own
       engine through these helpers, and disposes it in save().
Who:   Used by the SQL employees backend and by the ORM models.

Engine Configuration:
    SQLite (aiosqlite) uses a single-file database; pool options that only
    make sense for server databases are applied for other URLs only.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with a shared metadata
    object, which create_tables() uses to create missing tables.
    """
    pass


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    What:  Creates an async engine for the given URL.
    How:   Server databases get pre-ping and hourly recycling; SQLite does not
           pool connections across processes so it takes the defaults.
    """
    options = {"echo": echo}
    if not database_url.startswith("sqlite"):
        options.update(pool_pre_ping=True, pool_recycle=3600)
    return create_async_engine(database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Creates AsyncSession instances bound to `engine`.

    expire_on_commit=False keeps attribute values readable after commit,
    outside the session context.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Creates every table registered on Base.metadata that does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
