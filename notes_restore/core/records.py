"""Typed records decoded from archive entries.

Records are open models: keys the importer does not care about are kept
as extras so the stored payload matches what was exported.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ArchiveRecord(BaseModel):
    """Base model for a single JSON object taken from an export archive."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | int | None = None

    def to_payload(self) -> dict[str, Any]:
        """Plain dict handed to the store, using the archive's key names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class NoteRecord(ArchiveRecord):
    content: str | None = None
    encrypted_data: str | None = Field(default=None, alias="encryptedData")

    @property
    def is_encrypted(self) -> bool:
        return bool(self.encrypted_data)


class AttachmentRecord(ArchiveRecord):
    pass


class BulkRecord(BaseModel):
    """All values of one collection (``tags.json``, ``configs.json``, ...)."""

    type: str
    values: list[dict[str, Any]]
