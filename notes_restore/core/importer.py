"""Import orchestration: classify the input, run the import, signal observers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

from notes_restore.archive.base import ArchiveHandle, ArchiveReader
from notes_restore.archive.zip import ZipArchiveReader
from notes_restore.core.classifier import classify
from notes_restore.core.exceptions import KeyDecodeError
from notes_restore.core.paths import DEFAULT_PROFILE
from notes_restore.core.router import EntryRouter, plan_entries
from notes_restore.core.types import (
    Collection,
    FileKind,
    ImportCompleted,
    ImportEvent,
    ImportResult,
    ImportStarted,
    ImportStatus,
    InputFile,
)
from notes_restore.store.base import Store

logger = logging.getLogger(__name__)

PRIVATE_KEY_CONFIG = "privateKey"

# Seconds between a successful ``completed`` signal and the reload callback,
# so observers can react to ``completed`` first.
RELOAD_DELAY = 0.8

ImportListener = Callable[[ImportEvent], None]


def _log_orphan(task: asyncio.Task) -> None:
    """Report a record task that settled after its import already failed."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Entry %s failed after import aborted: %s", task.get_name(), exc)
    else:
        logger.debug("Entry %s finished after import aborted", task.get_name())


class ArchiveImport:
    """Imports every record of one opened archive in two phases.

    Phase 1 imports all records except configuration concurrently.
    Phase 2 imports the configuration entries, one at a time, once phase 1
    has settled; configuration can enable encryption, which would corrupt
    records imported after it.
    """

    def __init__(self, store: Store) -> None:
        self._router = EntryRouter(store)
        self._pending: list[asyncio.Task] = []

    def close_when_settled(self, handle: ArchiveHandle) -> None:
        """Close *handle* once no record task can read from it any more."""
        pending = [t for t in self._pending if not t.done()]
        if not pending:
            handle.close()
            return
        waiter = asyncio.gather(*pending, return_exceptions=True)
        waiter.add_done_callback(lambda _: handle.close())

    async def run(self, handle: ArchiveHandle, result: ImportResult) -> None:
        plan = plan_entries(handle)

        # Phase 1 counts into its own result so tasks still running after a
        # failure never touch the result handed back to the caller.
        staged = ImportResult(kind=result.kind)
        logger.info("Phase 1: importing %d entries", len(plan.records))
        tasks = [
            asyncio.create_task(
                self._router.decode_and_route(handle, entry, staged),
                name=entry.name,
            )
            for entry in plan.records
        ]
        try:
            await asyncio.gather(*tasks)
        except Exception:
            # Siblings keep running; nobody waits on them any more.
            self._pending = [t for t in tasks if not t.done()]
            for task in self._pending:
                task.add_done_callback(_log_orphan)
            raise
        result.merge(staged)

        if not plan.configs:
            logger.info("Phase 2: archive has no configuration entry")
            return

        for entry in plan.configs:
            logger.info("Phase 2: importing %s", entry.name)
            await self._router.decode_and_route(handle, entry, result)


class Importer:
    """Top-level controller for one user-initiated import.

    Usage::

        importer = Importer(store, on_reload=app.reload)
        importer.subscribe(progress.handle_event)
        result = await importer.run([InputFile.from_path("backup.zip")])

    ``run`` never raises for import failures: the error is carried by
    the ``completed`` event and by the returned :class:`ImportResult`.
    Overlapping calls on one importer run one after the other; importers
    built with the same *lock* also wait for each other.
    """

    def __init__(
        self,
        store: Store,
        archive_reader: ArchiveReader | None = None,
        *,
        on_reload: Callable[[], object] | None = None,
        reload_delay: float = RELOAD_DELAY,
        on_complete: Callable[[ImportResult], object] | None = None,
        lock: asyncio.Lock | None = None,
    ) -> None:
        self._store = store
        self._archive_reader = archive_reader or ZipArchiveReader()
        self._on_reload = on_reload
        self._reload_delay = reload_delay
        self._on_complete = on_complete
        self._listeners: list[ImportListener] = []
        self._lock = lock or asyncio.Lock()
        self.reload_handle: asyncio.TimerHandle | None = None

    def subscribe(self, listener: ImportListener) -> Callable[[], None]:
        """Register *listener* for lifecycle events; returns an unsubscribe."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _emit(self, event: ImportEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Import listener %r failed", listener)

    def _schedule_reload(self) -> None:
        if self._on_reload is None:
            return
        loop = asyncio.get_running_loop()
        self.reload_handle = loop.call_later(self._reload_delay, self._on_reload)

    async def run(self, files: Sequence[InputFile]) -> ImportResult:
        if not files:
            return ImportResult(kind=FileKind.UNKNOWN)

        file = files[0]
        kind = classify(file)
        if kind == FileKind.UNKNOWN:
            logger.info("Ignoring %s: neither an archive nor a key", file.name)
            return ImportResult(kind=kind)

        async with self._lock:
            return await self._run(file, kind)

    async def _run(self, file: InputFile, kind: FileKind) -> ImportResult:
        result = ImportResult(kind=kind)
        self._emit(ImportStarted())

        try:
            if kind == FileKind.ARCHIVE:
                await self.import_archive(file, result)
            else:
                await self.import_key(file, result)
        except Exception as exc:
            logger.error("Import of %s failed: %s", file.name, exc)
            result.status = ImportStatus.FAILED
            result.error = exc
        else:
            result.status = ImportStatus.COMPLETED
            logger.info(
                "Imported %d records from %s", result.records_imported, file.name
            )

        self._emit(ImportCompleted(result))
        if result.ok:
            self._schedule_reload()
        if self._on_complete is not None:
            self._on_complete(result)
        return result

    async def import_archive(self, file: InputFile, result: ImportResult) -> None:
        handle = await self._archive_reader.open(file.data)
        archive_import = ArchiveImport(self._store)
        try:
            await archive_import.run(handle, result)
        finally:
            archive_import.close_when_settled(handle)

    async def import_key(self, file: InputFile, result: ImportResult) -> None:
        try:
            value = file.data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise KeyDecodeError(str(exc)) from exc

        await self._store.save_config(PRIVATE_KEY_CONFIG, value, DEFAULT_PROFILE)
        result.count(Collection.CONFIGS)
