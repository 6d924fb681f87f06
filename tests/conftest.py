from __future__ import annotations

import asyncio
import io
import json
import zipfile
from typing import Any

import pytest

from notes_restore.core.exceptions import PersistenceError
from notes_restore.core.importer import Importer
from notes_restore.core.types import Collection, ImportEvent, InputFile
from notes_restore.store.memory import InMemoryStore


def build_zip(files: dict[str, bytes | str | Any]) -> bytes:
    """Create an in-memory zip archive from a dict of {path: content}.

    Non-string, non-bytes values are JSON-encoded.  Paths ending in ``/``
    become directory entries.
    """
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.items():
            if not isinstance(data, str | bytes):
                data = json.dumps(data)
            if isinstance(data, str):
                data = data.encode("utf-8")
            zf.writestr(name, data)
    return buf.getvalue()


def zip_file(files: dict[str, Any], name: str = "backup.zip") -> InputFile:
    return InputFile.from_bytes(name, build_zip(files), media_type="application/zip")


class RecordingStore(InMemoryStore):
    """In-memory store that logs every write and can delay or fail them.

    ``events`` holds ``start:<Collection>``, ``end:<Collection>`` and
    ``fail:<Collection>`` markers in the order they happened.
    """

    def __init__(
        self,
        *,
        fail_on: set[Collection] | None = None,
        delays: dict[Collection, float] | None = None,
    ) -> None:
        super().__init__()
        self.calls: list[tuple[str, Collection, str]] = []
        self.events: list[str] = []
        self._fail_on = fail_on or set()
        self._delays = delays or {}

    async def _hook(self, method: str, collection: Collection, profile_id: str) -> None:
        self.calls.append((method, collection, profile_id))
        self.events.append(f"start:{collection.value}")
        await asyncio.sleep(self._delays.get(collection, 0))
        if collection in self._fail_on:
            self.events.append(f"fail:{collection.value}")
            raise PersistenceError(collection.value, "injected failure")
        self.events.append(f"end:{collection.value}")

    async def save_record(self, collection, record, profile_id, *, skip_validation=False):
        await self._hook("save_record", collection, profile_id)
        await super().save_record(
            collection, record, profile_id, skip_validation=skip_validation
        )

    async def save_batch(self, collection, profile_id, values):
        await self._hook("save_batch", collection, profile_id)
        await super().save_batch(collection, profile_id, values)


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def events() -> list[ImportEvent]:
    return []


@pytest.fixture()
def importer(store: RecordingStore, events: list[ImportEvent]) -> Importer:
    imp = Importer(store)
    imp.subscribe(events.append)
    return imp
