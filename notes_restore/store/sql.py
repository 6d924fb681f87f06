from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from notes_restore.core.exceptions import PersistenceError
from notes_restore.core.types import Collection
from notes_restore.store.base import Store
from notes_restore.store.models import Base, RecordRow

logger = logging.getLogger(__name__)


class SqlStore(Store):
    """Store backed by SQLAlchemy's async engine.

    Every restored record becomes one row of the ``records`` table keyed
    by ``(profile_id, collection, key)`` with the archived JSON as its
    payload.  Writes are serialized through one lock so that SQLite
    never sees two writers at once.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(url, echo=echo)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)
        self._write_lock = asyncio.Lock()

    @classmethod
    def sqlite(cls, path: str = ":memory:") -> SqlStore:
        if path == ":memory:":
            return cls("sqlite+aiosqlite:///:memory:")
        return cls(f"sqlite+aiosqlite:///{path}")

    @classmethod
    def postgres(
        cls,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
    ) -> SqlStore:
        return cls(f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{database}")

    @asynccontextmanager
    async def _session(self, collection: str) -> AsyncIterator[AsyncSession]:
        """Yield an auto-committing session, wrapping driver errors."""
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            raise PersistenceError(collection, str(exc)) from exc
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    # ── Lifecycle ────────────────────────────────────────────────────

    async def init(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def reset(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await self.init()

    async def close(self) -> None:
        await self._engine.dispose()

    # ── Writes ───────────────────────────────────────────────────────

    async def _put(
        self,
        collection: Collection,
        profile_id: str,
        records: list[dict[str, Any]],
    ) -> None:
        async with self._write_lock, self._session(collection.value) as s:
            for record in records:
                await s.merge(
                    RecordRow(
                        profile_id=profile_id,
                        collection=collection.value,
                        key=self.key_for(collection, record),
                        payload=record,
                    )
                )
        logger.debug(
            "Stored %d %s record(s) for profile %s",
            len(records),
            collection.value,
            profile_id,
        )

    async def save_record(
        self,
        collection: Collection,
        record: dict[str, Any],
        profile_id: str,
        *,
        skip_validation: bool = False,
    ) -> None:
        if not skip_validation:
            self.validate_record(collection, record)
        await self._put(collection, profile_id, [record])

    async def save_batch(
        self,
        collection: Collection,
        profile_id: str,
        values: list[dict[str, Any]],
    ) -> None:
        await self._put(collection, profile_id, values)

    # ── Reads ────────────────────────────────────────────────────────

    async def get_records(
        self, collection: Collection, profile_id: str
    ) -> list[dict[str, Any]]:
        async with self._session(collection.value) as s:
            stmt = (
                select(RecordRow)
                .where(RecordRow.profile_id == profile_id)
                .where(RecordRow.collection == collection.value)
                .order_by(RecordRow.key)
            )
            rows = list((await s.execute(stmt)).scalars().all())
        return [dict(r.payload) for r in rows]

    async def list_profiles(self) -> list[str]:
        async with self._session("profiles") as s:
            stmt = select(RecordRow.profile_id).distinct().order_by(RecordRow.profile_id)
            return list((await s.execute(stmt)).scalars().all())
