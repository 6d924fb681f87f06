from notes_restore.archive.base import ArchiveEntry, ArchiveHandle, ArchiveReader
from notes_restore.archive.zip import ZipArchiveReader

__all__ = [
    "ArchiveEntry",
    "ArchiveHandle",
    "ArchiveReader",
    "ZipArchiveReader",
]
