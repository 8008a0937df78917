"""
Hivemind — SQLite Store
=======================

What:  Durable HivemindStore backed by an embedded SQLite database file.
How:   Async SQLAlchemy (aiosqlite driver). Each bucket is a table of
       (key, value) pairs: key = raw bytes of the entity ID, value = the
       entity's JSON encoding. Buckets are created when the file is opened.
Who:   The default store wired in by the entry point (HIVEMIND_STORE=sqlite).

Lifecycle:
    store = SQLiteHivemindStore("hivemind.db")
    await store.open()      # creates the file and missing bucket tables
    ...                     # get_one / get_all / put
    await store.close()     # disposes the engine, releases the file

    Any operation outside open()/close() raises StoreError.

Error Handling:
    SQLAlchemy/driver errors and undecodable stored values are wrapped in
    StoreError so that nothing database-specific reaches the HTTP layer.
"""

import logging
from typing import List, Optional, Type

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hivemind.database import Base, build_engine, build_session_factory
from hivemind.exceptions import DecodeError, EncodeError, StoreError
from hivemind.models.bucket import BUCKETS
from hivemind.schemas.entities import Entity
from hivemind.stores.base import E, HivemindStore

logger = logging.getLogger(__name__)


class SQLiteHivemindStore(HivemindStore):
    """
    HivemindStore implementation based on an embedded SQLite file.

    Args:
        db_path: Database file; created if it does not exist.
        timeout: Seconds to wait on a locked file before an operation fails.
        echo:    Log SQL statements.
    """

    def __init__(self, db_path: str, timeout: float = 1.0, echo: bool = False):
        self.db_path = db_path
        self.timeout = timeout
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def open(self) -> None:
        """
        Open the database file and make sure every bucket table exists.

        Raises:
            StoreError: The file could not be opened or is not a database.
        """
        if self._engine is not None:
            return

        engine = build_engine(self.db_path, timeout=self.timeout, echo=self.echo)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            await engine.dispose()
            raise StoreError(
                message=f"Setup of {self.db_path} failed",
                context={"db_path": self.db_path, "error": str(e)},
            ) from e

        self._engine = engine
        self._session_factory = build_session_factory(engine)
        logger.info("Opened store %s (buckets: %s)", self.db_path, ", ".join(BUCKETS))

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Closed store %s", self.db_path)

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise StoreError(
                message=f"Store {self.db_path} is not open",
                context={"db_path": self.db_path},
            )
        return self._session_factory

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_one(self, kind: Type[E], entity_id: str) -> Optional[E]:
        bucket = BUCKETS[kind.bucket]
        sessions = self._sessions()
        try:
            async with sessions() as session:
                async with session.begin():
                    row = await session.get(bucket, entity_id.encode("utf-8"))
                    value = None if row is None else row.value
        except SQLAlchemyError as e:
            raise StoreError(
                message=f"Could not read {kind.bucket} {entity_id!r}",
                bucket=kind.bucket,
                context={"error": str(e)},
            ) from e

        if value is None:
            return None
        return self._decode(kind, value)

    async def get_all(self, kind: Type[E]) -> List[E]:
        bucket = BUCKETS[kind.bucket]
        sessions = self._sessions()
        try:
            async with sessions() as session:
                async with session.begin():
                    result = await session.execute(select(bucket.value).order_by(bucket.key))
                    values = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreError(
                message=f"Could not list bucket {kind.bucket}",
                bucket=kind.bucket,
                context={"error": str(e)},
            ) from e

        return [self._decode(kind, value) for value in values]

    # ── Writes ────────────────────────────────────────────────────────────

    async def put(self, entity: Entity) -> None:
        bucket = BUCKETS[entity.bucket]
        sessions = self._sessions()
        try:
            encoded = entity.encode()
        except EncodeError as e:
            raise StoreError(
                message=f"Could not serialize {entity.bucket} {entity.id!r}",
                bucket=entity.bucket,
                context=e.context,
            ) from e

        stmt = sqlite_insert(bucket).values(key=entity.id.encode("utf-8"), value=encoded)
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={"value": stmt.excluded["value"]},
        )
        try:
            async with sessions() as session:
                async with session.begin():
                    await session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(
                message=f"Could not write {entity.bucket} {entity.id!r}",
                bucket=entity.bucket,
                context={"error": str(e)},
            ) from e

        logger.debug("Stored %s %r (%d bytes)", entity.bucket, entity.id, len(encoded))

    @staticmethod
    def _decode(kind: Type[E], value: bytes) -> E:
        try:
            return kind.decode(value)
        except DecodeError as e:
            raise StoreError(
                message=f"Stored {kind.bucket} value is corrupt",
                bucket=kind.bucket,
                context=e.context,
            ) from e
