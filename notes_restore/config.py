from __future__ import annotations

from typing import Any

from notes_restore.archive.base import ArchiveReader
from notes_restore.core.exceptions import UnsupportedBackendError
from notes_restore.store.base import Store


class _Registry[T]:
    """Lazily-populated factory registry.

    Each backend registers itself via :meth:`register`.  :meth:`build`
    resolves a provider name to a factory, calling
    ``factory.from_config(config)`` if available, otherwise
    ``factory(**config)``.
    """

    def __init__(self, label: str) -> None:
        self._label = label
        self._factories: dict[str, Any] = {}
        self._defaults_loaded = False

    def register(self, name: str, factory: Any) -> None:
        self._factories[name] = factory

    def names(self) -> list[str]:
        self._ensure_defaults()
        return list(self._factories)

    def build(self, provider: str, config: dict[str, Any]) -> T:
        self._ensure_defaults()
        factory = self._factories.get(provider)
        if factory is None:
            raise UnsupportedBackendError(
                f"Unknown {self._label} provider '{provider}'. "
                f"Available: {list(self._factories)}"
            )
        if hasattr(factory, "from_config"):
            return factory.from_config(config)
        return factory(**config)

    def _ensure_defaults(self) -> None:
        if not self._defaults_loaded:
            self._load_defaults()
            self._defaults_loaded = True

    def _load_defaults(self) -> None:
        """Override point: subclasses populate built-in factories here."""


class _StoreRegistry(_Registry[Store]):
    def _load_defaults(self) -> None:
        from notes_restore.store.memory import InMemoryStore
        from notes_restore.store.sql import SqlStore

        self.register("memory", InMemoryStore)
        self.register("sqlite", SqlStore.sqlite)
        self.register("postgres", SqlStore.postgres)
        self.register("sql", SqlStore)


class _ArchiveRegistry(_Registry[ArchiveReader]):
    def _load_defaults(self) -> None:
        from notes_restore.archive.zip import ZipArchiveReader

        self.register("zip", ZipArchiveReader)


# Singleton instances
store_registry = _StoreRegistry("store")
archive_registry = _ArchiveRegistry("archive")


def parse_config(config: dict[str, Any]) -> tuple[Store, ArchiveReader]:
    """Parse a user config dict and return (store, archive_reader).

    Expected shape::

        {
            "store": {"provider": "sqlite", "config": {"path": "notes.db"}},
            "archive": {"provider": "zip", "config": {}},
        }

    Both sections are optional: the store defaults to in-memory and the
    archive reader to zip.
    """
    store_cfg = config.get("store", {})
    archive_cfg = config.get("archive", {})

    store = store_registry.build(
        store_cfg.get("provider", "memory"),
        store_cfg.get("config", {}),
    )
    archive_reader = archive_registry.build(
        archive_cfg.get("provider", "zip"),
        archive_cfg.get("config", {}),
    )
    return store, archive_reader
