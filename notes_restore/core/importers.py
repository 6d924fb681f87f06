"""Record importers -- one per kind of archive entry.

Each importer turns one decoded entry into calls against the
:class:`Store` for the entry's profile.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from notes_restore.archive.base import ArchiveHandle
from notes_restore.core.exceptions import EntryDecodeError, MissingNoteContentError
from notes_restore.core.paths import ArchivePath, markdown_sibling
from notes_restore.core.records import AttachmentRecord, BulkRecord, NoteRecord
from notes_restore.core.types import Collection, ImportResult
from notes_restore.store.base import Store

logger = logging.getLogger(__name__)

# Bulk collection files an archive may carry, keyed by the name before
# ``.json``.  Anything else is skipped so that archives from newer or
# older versions still import.
BULK_COLLECTIONS: dict[str, Collection] = {
    "notebooks": Collection.NOTEBOOKS,
    "tags": Collection.TAGS,
    "configs": Collection.CONFIGS,
    "users": Collection.USERS,
    "files": Collection.FILES,
}


@dataclass
class DecodedEntry:
    """An archive entry whose JSON has been parsed, ready to import."""

    handle: ArchiveHandle
    path: ArchivePath
    data: Any

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def profile_id(self) -> str:
        return self.path.profile_id


class EntryImporter[Record: BaseModel](ABC):
    """Base class for the per-kind importers."""

    record_schema: ClassVar[type[BaseModel]]

    def __init__(self, store: Store) -> None:
        self._store = store

    def parse(self, entry: DecodedEntry) -> Record:
        """Validate the decoded JSON against :attr:`record_schema`."""
        try:
            return self.record_schema.model_validate(entry.data)  # type: ignore[return-value]
        except ValidationError as exc:
            raise EntryDecodeError(entry.name, str(exc)) from exc

    @abstractmethod
    async def run(self, entry: DecodedEntry, result: ImportResult) -> None:
        """Import *entry*, recording what was stored on *result*."""
        ...


class NoteImporter(EntryImporter[NoteRecord]):
    """Imports one note, pulling its body from the ``.md`` sibling."""

    record_schema = NoteRecord

    async def read_content(self, entry: DecodedEntry, note: NoteRecord) -> None:
        # Encrypted notes carry their body inside encryptedData.
        if note.is_encrypted:
            return

        md_name = markdown_sibling(entry.name)
        md_entry = entry.handle.get(md_name)
        if md_entry is None:
            raise MissingNoteContentError(md_name)
        note.content = await md_entry.read_text()

    async def run(self, entry: DecodedEntry, result: ImportResult) -> None:
        note = self.parse(entry)
        await self.read_content(entry, note)
        # Exported notes are trusted to be well-formed already.
        await self._store.save_record(
            Collection.NOTES,
            note.to_payload(),
            entry.profile_id,
            skip_validation=True,
        )
        result.count(Collection.NOTES)


class AttachmentImporter(EntryImporter[AttachmentRecord]):
    record_schema = AttachmentRecord

    async def run(self, entry: DecodedEntry, result: ImportResult) -> None:
        attachment = self.parse(entry)
        await self._store.save_record(
            Collection.FILES, attachment.to_payload(), entry.profile_id
        )
        result.count(Collection.FILES)


class CollectionImporter(EntryImporter[BulkRecord]):
    """Imports a whole collection file (``tags.json``, ...) in one call."""

    record_schema = BulkRecord

    def parse(self, entry: DecodedEntry) -> BulkRecord:
        try:
            return BulkRecord(type=entry.path.type_name, values=entry.data)
        except ValidationError as exc:
            raise EntryDecodeError(entry.name, str(exc)) from exc

    async def run(self, entry: DecodedEntry, result: ImportResult) -> None:
        collection = BULK_COLLECTIONS.get(entry.path.type_name)
        if collection is None:
            logger.debug("Skipping unknown collection type in %s", entry.name)
            result.skipped_entries.append(entry.name)
            return

        bulk = self.parse(entry)
        await self._store.save_batch(collection, entry.profile_id, bulk.values)
        result.count(collection, len(bulk.values))
