"""Archive entry naming.

Export archives lay entries out as::

    <marker>/<profile>/notes/<id>.json     note metadata
    <marker>/<profile>/notes/<id>.md       note body (unencrypted notes)
    <marker>/<profile>/files/<id>.json     file attachment
    <marker>/<profile>/<type>.json         bulk collection (notebooks, tags, ...)

Archives written by older versions use ``notes-db`` as the profile
segment; it stands for the default profile.
"""

from __future__ import annotations

from dataclasses import dataclass

from notes_restore.core.exceptions import EntryDecodeError

DEFAULT_PROFILE = "default"
LEGACY_PROFILE_SEGMENT = "notes-db"

NOTES_SEGMENT = "notes"
FILES_SEGMENT = "files"
JSON_SUFFIX = ".json"
MARKDOWN_SUFFIX = ".md"
CONFIG_ENTRY_MARKER = "configs.json"


def profile_for_segment(segment: str) -> str:
    return DEFAULT_PROFILE if segment == LEGACY_PROFILE_SEGMENT else segment


def is_json_entry(name: str) -> bool:
    return name.split(".")[-1] == "json"


def is_config_entry(name: str) -> bool:
    return CONFIG_ENTRY_MARKER in name


def markdown_sibling(name: str) -> str:
    """Swap a trailing ``.json`` for ``.md``."""
    if name.endswith(JSON_SUFFIX):
        return name[: -len(JSON_SUFFIX)] + MARKDOWN_SUFFIX
    return name


@dataclass(frozen=True)
class ArchivePath:
    name: str
    segments: tuple[str, ...]

    @classmethod
    def parse(cls, name: str) -> ArchivePath:
        segments = tuple(name.split("/"))
        if len(segments) < 3:
            raise EntryDecodeError(name, "expected <marker>/<profile>/<collection>")
        return cls(name=name, segments=segments)

    @property
    def profile_id(self) -> str:
        return profile_for_segment(self.segments[1])

    @property
    def collection_segment(self) -> str:
        return self.segments[2]

    @property
    def is_note(self) -> bool:
        return self.collection_segment == NOTES_SEGMENT

    @property
    def is_file(self) -> bool:
        return self.collection_segment == FILES_SEGMENT

    @property
    def type_name(self) -> str:
        """Bulk collection type, e.g. ``tags`` for ``tags.json``."""
        return self.collection_segment.split(JSON_SUFFIX)[0]
