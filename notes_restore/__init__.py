from notes_restore.core import (
    Collection,
    FileKind,
    ImportCompleted,
    ImportEvent,
    ImportFailedError,
    Importer,
    ImportResult,
    ImportStarted,
    ImportStatus,
    InputFile,
    classify,
)
from notes_restore.facade import NotesRestore

__all__ = [
    "Collection",
    "FileKind",
    "ImportCompleted",
    "ImportEvent",
    "ImportFailedError",
    "ImportResult",
    "ImportStarted",
    "ImportStatus",
    "Importer",
    "InputFile",
    "NotesRestore",
    "classify",
]
