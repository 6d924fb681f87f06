from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any

from notes_restore.core.exceptions import RecordValidationError
from notes_restore.core.paths import DEFAULT_PROFILE
from notes_restore.core.types import Collection
from notes_restore.store.utils import generate_id


def record_key(collection: Collection, record: dict[str, Any]) -> str | None:
    """Return the identity of *record* inside its collection.

    Configs are keyed by ``name``; everything else by ``id``.
    """
    field = "name" if collection == Collection.CONFIGS else "id"
    value = record.get(field)
    return str(value) if value not in (None, "") else None


class Store(ABC):
    """Abstract persistence port for restored records.

    Every record lives in exactly one ``(profile_id, collection)``
    namespace.  Writing a record whose key already exists replaces it.
    Implementations must raise :class:`PersistenceError` (or a subclass)
    for any failed write.
    """

    # ── Lifecycle ────────────────────────────────────────────────────

    @abstractmethod
    async def init(self) -> None:
        """Create tables / indices (idempotent)."""
        ...

    @abstractmethod
    async def reset(self) -> None:
        """Drop all data and recreate from scratch."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release any held resources (connections, file handles)."""
        ...

    async def __aenter__(self) -> Store:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ── Writes ───────────────────────────────────────────────────────

    @abstractmethod
    async def save_record(
        self,
        collection: Collection,
        record: dict[str, Any],
        profile_id: str,
        *,
        skip_validation: bool = False,
    ) -> None:
        """Persist one record.

        Unless *skip_validation* is set the record is checked with
        :meth:`validate_record` first.
        """
        ...

    @abstractmethod
    async def save_batch(
        self,
        collection: Collection,
        profile_id: str,
        values: list[dict[str, Any]],
    ) -> None:
        """Persist every record of *values* into one collection."""
        ...

    async def save_config(
        self, name: str, value: Any, profile_id: str = DEFAULT_PROFILE
    ) -> None:
        """Persist a single named configuration value."""
        await self.save_record(
            Collection.CONFIGS, {"name": name, "value": value}, profile_id
        )

    # ── Reads ────────────────────────────────────────────────────────

    @abstractmethod
    async def get_records(
        self, collection: Collection, profile_id: str
    ) -> list[dict[str, Any]]:
        """Return every record of a collection for one profile."""
        ...

    @abstractmethod
    async def list_profiles(self) -> list[str]:
        """Return the ids of all profiles holding at least one record."""
        ...

    async def get_config(
        self, name: str, profile_id: str = DEFAULT_PROFILE
    ) -> Any | None:
        for config in await self.get_records(Collection.CONFIGS, profile_id):
            if config.get("name") == name:
                return config.get("value")
        return None

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def validate_record(collection: Collection, record: dict[str, Any]) -> None:
        if record_key(collection, record) is None:
            raise RecordValidationError(
                collection.value, "record has no identifying key"
            )

    @staticmethod
    def key_for(collection: Collection, record: dict[str, Any]) -> str:
        return record_key(collection, record) or generate_id()
