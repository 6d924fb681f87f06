from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

DEFAULT_MEDIA_TYPE = "application/octet-stream"

# Media types export files are reported with, whatever the platform's
# mimetypes table says (``.asc`` may map to application/pgp-keys).
SUFFIX_MEDIA_TYPES = {
    "zip": "application/zip",
    "asc": "text/plain",
}


class FileKind(StrEnum):
    ARCHIVE = "archive"
    KEY = "key"
    UNKNOWN = "unknown"


class ImportStatus(StrEnum):
    SKIPPED = "skipped"
    COMPLETED = "completed"
    FAILED = "failed"


class Collection(StrEnum):
    """Logical collections a restored record can land in.

    Values are the title-cased collection type names used in export
    archives (``notebooks.json`` → ``Notebooks``).
    """

    NOTES = "Notes"
    FILES = "Files"
    NOTEBOOKS = "Notebooks"
    TAGS = "Tags"
    CONFIGS = "Configs"
    USERS = "Users"


def guess_media_type(name: str) -> str:
    suffix = name.rsplit(".", 1)[-1].lower()
    if suffix in SUFFIX_MEDIA_TYPES:
        return SUFFIX_MEDIA_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(name)
    return guessed or DEFAULT_MEDIA_TYPE


@dataclass(frozen=True)
class InputFile:
    """A user-supplied file, alive only for one import operation."""

    media_type: str
    name: str
    size: int
    data: bytes = field(repr=False)

    @classmethod
    def from_bytes(
        cls, name: str, data: bytes, media_type: str | None = None
    ) -> InputFile:
        if media_type is None:
            media_type = guess_media_type(name)
        return cls(media_type=media_type, name=name, size=len(data), data=data)

    @classmethod
    def from_path(cls, path: str | Path, media_type: str | None = None) -> InputFile:
        path = Path(path)
        return cls.from_bytes(path.name, path.read_bytes(), media_type)

    @property
    def suffix(self) -> str:
        """Text after the last dot (the whole name when there is no dot)."""
        return self.name.split(".")[-1]


@dataclass
class ImportResult:
    """Result returned from :meth:`Importer.run`."""

    kind: FileKind
    status: ImportStatus = ImportStatus.SKIPPED
    error: Exception | None = None
    records_imported: int = 0
    breakdown: dict[str, int] = field(default_factory=dict)
    skipped_entries: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status != ImportStatus.FAILED

    def count(self, collection: Collection, n: int = 1) -> None:
        self.breakdown[collection.value] = self.breakdown.get(collection.value, 0) + n
        self.records_imported += n

    def merge(self, other: ImportResult) -> None:
        """Add the counts and skipped entries of *other* to this result."""
        for name, n in other.breakdown.items():
            self.breakdown[name] = self.breakdown.get(name, 0) + n
        self.records_imported += other.records_imported
        self.skipped_entries.extend(other.skipped_entries)


@dataclass(frozen=True)
class ImportStarted:
    """Emitted once per operation before any decode or persist work."""


@dataclass(frozen=True)
class ImportCompleted:
    """Emitted once per operation after it settles."""

    result: ImportResult

    @property
    def error(self) -> Exception | None:
        return self.result.error


type ImportEvent = ImportStarted | ImportCompleted
