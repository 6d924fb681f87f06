from notes_restore.store.base import Store
from notes_restore.store.memory import InMemoryStore
from notes_restore.store.sql import SqlStore

__all__ = [
    "InMemoryStore",
    "SqlStore",
    "Store",
]
