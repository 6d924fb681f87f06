"""Configuration management for the notes-restore CLI.

Reads/writes a TOML config file and provides a typed Config dataclass.
Default location: ``~/.config/notes-restore/config.toml``.
Override with the ``NOTES_RESTORE_CONFIG`` environment variable.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_DEFAULT_CONFIG_DIR = Path("~/.config/notes-restore").expanduser()
_DEFAULT_DB_PATH = "./data/notes.db"

STORE_PROVIDERS = ("sqlite", "postgres", "memory")


def _config_path() -> Path:
    env = os.environ.get("NOTES_RESTORE_CONFIG")
    if env:
        return Path(env).expanduser()
    return _DEFAULT_CONFIG_DIR / "config.toml"


@dataclass
class Config:
    # Store backend: "sqlite" (default), "postgres" or "memory"
    store_provider: str = "sqlite"

    # SQLite settings (only used when store_provider == "sqlite")
    db_path: str = _DEFAULT_DB_PATH

    # Postgres settings (only used when store_provider == "postgres")
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "notes_restore"
    db_user: str = "postgres"
    db_password: str = "postgres"

    @property
    def uses_postgres(self) -> bool:
        return self.store_provider == "postgres"

    def to_dict(self) -> dict[str, Any]:
        """Convert into the config dict accepted by ``NotesRestore.from_config``."""
        store_config: dict[str, Any] = {}
        if self.store_provider == "sqlite":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            store_config = {"path": self.db_path}
        elif self.uses_postgres:
            store_config = {
                "host": self.db_host,
                "port": self.db_port,
                "database": self.db_name,
                "user": self.db_user,
                "password": self.db_password,
            }
        return {
            "store": {"provider": self.store_provider, "config": store_config},
            "archive": {"provider": "zip", "config": {}},
        }


def load_config() -> Config:
    """Load config from disk, falling back to defaults + env overrides."""
    path = _config_path()
    cfg = Config()

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)
        store_section = data.get("store", {})
        sqlite_section = data.get("sqlite", {})
        db_section = data.get("database", {})

        cfg.store_provider = store_section.get("provider", cfg.store_provider)
        cfg.db_path = sqlite_section.get("path", cfg.db_path)

        cfg.db_host = db_section.get("host", cfg.db_host)
        cfg.db_port = int(db_section.get("port", cfg.db_port))
        cfg.db_name = db_section.get("name", cfg.db_name)
        cfg.db_user = db_section.get("user", cfg.db_user)
        cfg.db_password = db_section.get("password", cfg.db_password)

    # Environment variables always take precedence
    cfg.store_provider = os.environ.get("NOTES_RESTORE_STORE", cfg.store_provider)
    cfg.db_path = os.environ.get("NOTES_RESTORE_DB_PATH", cfg.db_path)
    cfg.db_host = os.environ.get("POSTGRES_HOST", cfg.db_host)
    cfg.db_port = int(os.environ.get("POSTGRES_PORT", str(cfg.db_port)))
    cfg.db_name = os.environ.get("POSTGRES_DB", cfg.db_name)
    cfg.db_user = os.environ.get("POSTGRES_USER", cfg.db_user)
    cfg.db_password = os.environ.get("POSTGRES_PASSWORD", cfg.db_password)

    return cfg


def save_config(cfg: Config) -> Path:
    """Write config to the TOML file. Returns the path written."""
    path = _config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = [
        "[store]",
        f'provider = "{cfg.store_provider}"',
        "",
        "[sqlite]",
        f'path = "{cfg.db_path}"',
        "",
    ]

    if cfg.uses_postgres:
        lines.extend(
            [
                "[database]",
                f'host = "{cfg.db_host}"',
                f"port = {cfg.db_port}",
                f'name = "{cfg.db_name}"',
                f'user = "{cfg.db_user}"',
                f'password = "{cfg.db_password}"',
                "",
            ]
        )

    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def config_exists() -> bool:
    return _config_path().exists()


def config_path_display() -> str:
    return str(_config_path())
