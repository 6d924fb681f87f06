"""Custom exceptions for import pipeline operations."""


class ImportFailedError(Exception):
    """Top-level error for anything that fails an import operation."""

    def __init__(self, message: str | None = None):
        self.message = f"Import failed: {message}" if message else "Import failed"
        super().__init__(self.message)


class ArchiveOpenError(ImportFailedError):
    def __init__(self, message: str | None = None):
        self.message = (
            f"Could not open archive: {message}"
            if message
            else "Could not open archive"
        )
        Exception.__init__(self, self.message)


class EntryDecodeError(ImportFailedError):
    """Raised when an archive entry cannot be decoded into a record."""

    def __init__(self, entry: str, message: str | None = None):
        self.entry = entry
        self.message = (
            f"Could not decode {entry}: {message}"
            if message
            else f"Could not decode {entry}"
        )
        Exception.__init__(self, self.message)


class MissingNoteContentError(ImportFailedError):
    """Raised when a plain-text note has no ``.md`` body next to it."""

    def __init__(self, entry: str):
        self.entry = entry
        self.message = f"Note body {entry} is missing from the archive"
        Exception.__init__(self, self.message)


class KeyDecodeError(ImportFailedError):
    def __init__(self, message: str | None = None):
        self.message = (
            f"Could not read key file: {message}"
            if message
            else "Could not read key file"
        )
        Exception.__init__(self, self.message)


class PersistenceError(ImportFailedError):
    """Raised when a store rejects a write."""

    def __init__(self, collection: str, message: str | None = None):
        self.collection = collection
        self.message = (
            f"Saving to {collection} failed: {message}"
            if message
            else f"Saving to {collection} failed"
        )
        Exception.__init__(self, self.message)


class RecordValidationError(PersistenceError):
    pass


class UnsupportedBackendError(ValueError):
    """Raised when an unknown store or archive backend is requested."""

    pass
