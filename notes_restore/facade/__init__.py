from notes_restore.facade.core import NotesRestore

__all__ = ["NotesRestore"]
