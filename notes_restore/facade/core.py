"""Main facade for the notes_restore library."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from notes_restore.config import parse_config
from notes_restore.core.importer import RELOAD_DELAY, ImportListener, Importer
from notes_restore.core.types import ImportResult, InputFile

if TYPE_CHECKING:
    from notes_restore.archive.base import ArchiveReader
    from notes_restore.store.base import Store

logger = logging.getLogger(__name__)


class NotesRestore:
    """Main entry point for the notes_restore library.

    Usage::

        from notes_restore.store.sql import SqlStore

        app = NotesRestore(store=SqlStore.sqlite("notes.db"))
        await app.init()
        result = await app.restore_path("/path/to/backup.zip")
    """

    def __init__(
        self,
        store: Store,
        archive_reader: ArchiveReader | None = None,
    ) -> None:
        self._store = store
        self._archive_reader = archive_reader
        # Shared by every importer so overlapping restores run in turn.
        self._import_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> NotesRestore:
        """Construct a NotesRestore instance from a configuration dict."""
        store, archive_reader = parse_config(config)
        return cls(store=store, archive_reader=archive_reader)

    @property
    def store(self) -> Store:
        return self._store

    async def init(self) -> None:
        """Create missing tables / indices (non-destructive)."""
        await self._store.init()

    async def reset(self) -> None:
        """Drop all data and recreate from scratch."""
        await self._store.reset()

    async def close(self) -> None:
        await self._store.close()

    def importer(
        self,
        *,
        on_reload: Callable[[], object] | None = None,
        reload_delay: float = RELOAD_DELAY,
        on_complete: Callable[[ImportResult], object] | None = None,
        listeners: Sequence[ImportListener] = (),
    ) -> Importer:
        importer = Importer(
            self._store,
            self._archive_reader,
            on_reload=on_reload,
            reload_delay=reload_delay,
            on_complete=on_complete,
            lock=self._import_lock,
        )
        for listener in listeners:
            importer.subscribe(listener)
        return importer

    async def restore(
        self, files: Sequence[InputFile], **importer_kwargs: Any
    ) -> ImportResult:
        """Import the first of *files* (an export archive or a private key)."""
        return await self.importer(**importer_kwargs).run(files)

    async def restore_path(self, path: str | Path, **importer_kwargs: Any) -> ImportResult:
        """Read *path* from disk and import it."""
        logger.info("Restoring from %s", path)
        return await self.restore([InputFile.from_path(path)], **importer_kwargs)
