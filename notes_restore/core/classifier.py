"""Decide what kind of file the user dropped, from its metadata alone."""

from __future__ import annotations

from notes_restore.core.types import FileKind, InputFile

ARCHIVE_MEDIA_TYPE = "application/zip"
ARCHIVE_SUFFIX = "zip"

KEY_MEDIA_TYPE = "text/plain"
KEY_SUFFIX = "asc"
# Armored private keys are never smaller than this.
KEY_MIN_SIZE = 2500


def is_archive(file: InputFile) -> bool:
    return file.media_type == ARCHIVE_MEDIA_TYPE or file.suffix == ARCHIVE_SUFFIX


def is_key(file: InputFile) -> bool:
    return (
        file.media_type == KEY_MEDIA_TYPE
        and file.suffix == KEY_SUFFIX
        and file.size >= KEY_MIN_SIZE
    )


def classify(file: InputFile) -> FileKind:
    """Return the :class:`FileKind` of *file*. Never reads its content."""
    if is_archive(file):
        return FileKind.ARCHIVE
    if is_key(file):
        return FileKind.KEY
    return FileKind.UNKNOWN
