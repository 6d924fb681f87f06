from notes_restore.core.classifier import classify, is_archive, is_key
from notes_restore.core.exceptions import (
    ArchiveOpenError,
    EntryDecodeError,
    ImportFailedError,
    KeyDecodeError,
    MissingNoteContentError,
    PersistenceError,
    RecordValidationError,
    UnsupportedBackendError,
)
from notes_restore.core.importer import ArchiveImport, Importer
from notes_restore.core.importers import BULK_COLLECTIONS
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

__all__ = [
    "ArchiveImport",
    "ArchiveOpenError",
    "BULK_COLLECTIONS",
    "Collection",
    "EntryDecodeError",
    "EntryRouter",
    "FileKind",
    "ImportCompleted",
    "ImportEvent",
    "ImportFailedError",
    "ImportResult",
    "ImportStarted",
    "ImportStatus",
    "Importer",
    "InputFile",
    "KeyDecodeError",
    "MissingNoteContentError",
    "PersistenceError",
    "RecordValidationError",
    "UnsupportedBackendError",
    "classify",
    "is_archive",
    "is_key",
    "plan_entries",
]
