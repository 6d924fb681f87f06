from __future__ import annotations

import asyncio
import io
import logging
import zipfile
from collections.abc import Mapping

from notes_restore.archive.base import ArchiveEntry, ArchiveHandle, ArchiveReader
from notes_restore.core.exceptions import ArchiveOpenError, EntryDecodeError

logger = logging.getLogger(__name__)


class ZipArchiveEntry(ArchiveEntry):
    def __init__(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> None:
        self._zf = zf
        self._info = info
        self.name = info.filename

    @property
    def is_dir(self) -> bool:
        return self._info.is_dir()

    def _read(self) -> str:
        return self._zf.read(self._info).decode("utf-8")

    async def read_text(self) -> str:
        try:
            return await asyncio.to_thread(self._read)
        except (zipfile.BadZipFile, UnicodeDecodeError, OSError) as exc:
            raise EntryDecodeError(self.name, str(exc)) from exc


class ZipArchiveHandle(ArchiveHandle):
    """Zip archive held fully in memory."""

    def __init__(self, zf: zipfile.ZipFile) -> None:
        self._zf = zf
        # zipfile keeps directory markers ("a/b/") with a trailing slash.
        self._entries = {
            info.filename: ZipArchiveEntry(zf, info) for info in zf.infolist()
        }

    @property
    def entries(self) -> Mapping[str, ArchiveEntry]:
        return self._entries

    def close(self) -> None:
        self._zf.close()


class ZipArchiveReader(ArchiveReader):
    """Opens ``.zip`` exports with the standard library ``zipfile`` module."""

    def _open(self, data: bytes) -> ZipArchiveHandle:
        try:
            zf = zipfile.ZipFile(io.BytesIO(data), "r")
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            raise ArchiveOpenError(str(exc)) from exc
        logger.info("Opened archive with %d entries", len(zf.infolist()))
        return ZipArchiveHandle(zf)

    async def open(self, data: bytes) -> ArchiveHandle:
        return await asyncio.to_thread(self._open, data)
