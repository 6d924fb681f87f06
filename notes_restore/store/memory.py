from __future__ import annotations

import copy
from collections import defaultdict
from typing import Any

from notes_restore.core.types import Collection
from notes_restore.store.base import Store


class InMemoryStore(Store):
    """Store backed by plain Python dicts.

    Thread-safe within a single asyncio event loop (no concurrent
    mutation between awaits).
    """

    def __init__(self) -> None:
        self._records: defaultdict[tuple[str, Collection], dict[str, dict]] = (
            defaultdict(dict)
        )

    # ── Lifecycle ────────────────────────────────────────────────────

    async def init(self) -> None:
        pass

    async def reset(self) -> None:
        self.__init__()  # type: ignore[misc]

    async def close(self) -> None:
        pass

    # ── Writes ───────────────────────────────────────────────────────

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
        key = self.key_for(collection, record)
        self._records[(profile_id, collection)][key] = copy.deepcopy(record)

    async def save_batch(
        self,
        collection: Collection,
        profile_id: str,
        values: list[dict[str, Any]],
    ) -> None:
        bucket = self._records[(profile_id, collection)]
        for record in values:
            bucket[self.key_for(collection, record)] = copy.deepcopy(record)

    # ── Reads ────────────────────────────────────────────────────────

    async def get_records(
        self, collection: Collection, profile_id: str
    ) -> list[dict[str, Any]]:
        bucket = self._records.get((profile_id, collection), {})
        return [copy.deepcopy(r) for r in bucket.values()]

    async def list_profiles(self) -> list[str]:
        return sorted({p for (p, _), bucket in self._records.items() if bucket})
