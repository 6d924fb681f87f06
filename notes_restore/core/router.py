"""Walk an opened archive and route each entry to its importer."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from notes_restore.archive.base import ArchiveEntry, ArchiveHandle
from notes_restore.core.exceptions import EntryDecodeError
from notes_restore.core.importers import (
    AttachmentImporter,
    CollectionImporter,
    DecodedEntry,
    EntryImporter,
    NoteImporter,
)
from notes_restore.core.paths import ArchivePath, is_config_entry, is_json_entry
from notes_restore.core.types import ImportResult
from notes_restore.store.base import Store

logger = logging.getLogger(__name__)


@dataclass
class EntryPlan:
    """Entries of one archive split by the phase they are imported in."""

    records: list[ArchiveEntry] = field(default_factory=list)
    configs: list[ArchiveEntry] = field(default_factory=list)


def plan_entries(handle: ArchiveHandle) -> EntryPlan:
    """Keep JSON entries only and set configuration entries aside.

    Configuration may turn on encryption, which would break every record
    imported after it, so it is always imported last.  An archive holds
    one configuration entry per profile.
    """
    plan = EntryPlan()
    for entry in handle.entries.values():
        if entry.is_dir or not is_json_entry(entry.name):
            continue
        if is_config_entry(entry.name):
            plan.configs.append(entry)
        else:
            plan.records.append(entry)
    return plan


class EntryRouter:
    """Decodes entries and dispatches them on their collection segment."""

    def __init__(self, store: Store) -> None:
        self.notes = NoteImporter(store)
        self.files = AttachmentImporter(store)
        self.collections = CollectionImporter(store)

    def importer_for(self, path: ArchivePath) -> EntryImporter:
        if path.is_note:
            return self.notes
        if path.is_file:
            return self.files
        return self.collections

    @staticmethod
    async def decode(handle: ArchiveHandle, entry: ArchiveEntry) -> DecodedEntry:
        text = await entry.read_text()
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise EntryDecodeError(entry.name, str(exc)) from exc
        return DecodedEntry(handle=handle, path=ArchivePath.parse(entry.name), data=data)

    async def decode_and_route(
        self,
        handle: ArchiveHandle,
        entry: ArchiveEntry,
        result: ImportResult,
    ) -> None:
        decoded = await self.decode(handle, entry)
        importer = self.importer_for(decoded.path)
        logger.debug(
            "Importing %s with %s (profile %s)",
            entry.name,
            type(importer).__name__,
            decoded.profile_id,
        )
        await importer.run(decoded, result)
