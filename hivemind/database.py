"""
Hivemind — Database Engine & Session Factory
============================================

What:  Async SQLAlchemy engine and session factory for the on-disk store.
How:   SQLite through the aiosqlite driver. One engine per opened store;
       sessions are short-lived, one per store call.
Who:   Used by SQLiteHivemindStore (open/close) and the bucket models.

Transactions:
    SQLite allows many readers and a single writer. Every store read runs in
    its own read transaction and every upsert in its own write transaction,
    so callers never see a half-written value.
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

    Its metadata holds one table per bucket and is used by the store to
    create missing buckets when it opens a database file.
    """
    pass


def build_engine(db_path: str, timeout: float = 1.0, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for a SQLite database file.

    Args:
        db_path: Path of the database file (created on first write).
        timeout: Seconds to wait on a locked database before failing.
        echo:    Log every SQL statement (DEBUG only).
    """
    return create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        connect_args={"timeout": timeout},
        echo=echo,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: rows stay readable after the transaction ends
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
