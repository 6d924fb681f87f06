from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import TracebackType


class ArchiveEntry(ABC):
    """One named member of an opened archive."""

    name: str

    @property
    @abstractmethod
    def is_dir(self) -> bool:
        """True for directory markers."""
        ...

    @abstractmethod
    async def read_text(self) -> str:
        """Decode the entry's bytes as UTF-8 text.

        Raises :class:`EntryDecodeError` when the bytes cannot be read
        or decoded.
        """
        ...


class ArchiveHandle(ABC):
    """Read-only view over an opened archive.

    Safe to share between concurrent readers; nothing writes to it
    after it is opened.
    """

    @property
    @abstractmethod
    def entries(self) -> Mapping[str, ArchiveEntry]:
        """Entries keyed by their ``/``-delimited path."""
        ...

    def get(self, name: str) -> ArchiveEntry | None:
        return self.entries.get(name)

    def close(self) -> None:
        """Release the underlying buffer. Default is a no-op."""

    def __enter__(self) -> ArchiveHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class ArchiveReader(ABC):
    """Abstract base class for archive container decoders."""

    @abstractmethod
    async def open(self, data: bytes) -> ArchiveHandle:
        """Decode raw bytes into an :class:`ArchiveHandle`.

        Raises :class:`ArchiveOpenError` for corrupt or unsupported input.
        """
        ...
