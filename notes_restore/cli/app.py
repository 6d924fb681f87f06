from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from notes_restore.cli import output as out
from notes_restore.cli.config import (
    STORE_PROVIDERS,
    Config,
    config_exists,
    config_path_display,
    load_config,
    save_config,
)

DESCRIPTION = """\
notes-restore: restore notes from an export archive

Imports a .zip export (notes, attachments, notebooks, tags, users and
settings, for every profile it contains) or an armored private key
(.asc) into the configured store."""


# ── Infrastructure helpers ──────────────────────────────────────────


def _build_app(cfg: Config):
    from notes_restore import NotesRestore

    return NotesRestore.from_config(cfg.to_dict())


def _print_event(event: Any) -> None:
    from notes_restore import ImportStarted

    if isinstance(event, ImportStarted):
        out.info(out.dim("Import started…"))


# ── import ──────────────────────────────────────────────────────────


async def cmd_import(args: argparse.Namespace) -> None:
    from notes_restore import FileKind, ImportStatus, InputFile

    path = Path(args.path)
    if not path.exists():
        out.error(f"File not found: {path}")
        sys.exit(1)

    file = InputFile.from_path(path, media_type=args.media_type)

    print()
    out.header("Restoring from export")
    out.kv("File", path)
    out.kv("Type", file.media_type)
    print()

    cfg = load_config()
    app = _build_app(cfg)
    async with app.store:
        await app.init()
        result = await app.restore([file], listeners=[_print_event])

    if result.status == ImportStatus.SKIPPED:
        out.error("Not an export archive (.zip) or a private key (.asc)")
        sys.exit(1)

    if result.status == ImportStatus.FAILED:
        out.error(str(result.error))
        sys.exit(1)

    if result.kind == FileKind.KEY:
        out.success("Private key imported")
    else:
        out.success("Archive imported")
        out.kv("Records", f"{result.records_imported:,}")
        out.counts(result.breakdown)
        if result.skipped_entries:
            out.kv("Skipped", ", ".join(result.skipped_entries))

    print()
    out.header("Next step:")
    out.next_step("notes-restore profiles", "see what was restored")
    print()


# ── profiles ────────────────────────────────────────────────────────


async def cmd_profiles(args: argparse.Namespace) -> None:
    from notes_restore import Collection

    cfg = load_config()
    app = _build_app(cfg)
    async with app.store:
        await app.init()
        profiles = await app.store.list_profiles()

        if not profiles:
            out.info("No profiles restored yet.")
            return

        out.header(f"Profiles ({len(profiles)})")
        for profile_id in profiles:
            print()
            out.info(out.bold(profile_id))
            breakdown = {}
            for collection in Collection:
                records = await app.store.get_records(collection, profile_id)
                if records:
                    breakdown[collection.value] = len(records)
            out.counts(breakdown)
    print()


# ── config ──────────────────────────────────────────────────────────


async def cmd_config_show(args: argparse.Namespace) -> None:
    cfg = load_config()

    out.header(f"Configuration ({config_path_display()})")
    print()
    out.kv("Store", cfg.store_provider)
    if cfg.store_provider == "sqlite":
        out.kv("Database file", cfg.db_path)
    elif cfg.uses_postgres:
        out.kv("Database", f"{cfg.db_user}@{cfg.db_host}:{cfg.db_port}/{cfg.db_name}")
    if not config_exists():
        print()
        out.info(out.dim("Using defaults; no config file written yet."))
    print()


async def cmd_config_set_store(args: argparse.Namespace) -> None:
    cfg = load_config()
    cfg.store_provider = args.backend
    if args.path:
        cfg.db_path = args.path
    path = save_config(cfg)
    out.success(f"Store set to {cfg.store_provider} ({path})")


async def cmd_config_path(args: argparse.Namespace) -> None:
    print(config_path_display())


# ── Parser ──────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notes-restore",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed progress logs",
    )
    sub = parser.add_subparsers(dest="command", title="commands")

    p_import = sub.add_parser("import", help="Import an export archive or a key file")
    p_import.add_argument("path", help="Path to a .zip export or an .asc private key")
    p_import.add_argument(
        "--media-type",
        default=None,
        help="Override the guessed media type (e.g. application/zip)",
    )

    sub.add_parser("profiles", help="List restored profiles and record counts")

    p_cfg = sub.add_parser("config", help="View and change settings")
    cfg_sub = p_cfg.add_subparsers(dest="config_command", title="config commands")

    cfg_sub.add_parser("show", help="Show current settings")
    p_cfg_store = cfg_sub.add_parser("set-store", help="Configure the store backend")
    p_cfg_store.add_argument(
        "backend",
        choices=STORE_PROVIDERS,
        help="Store backend to use",
    )
    p_cfg_store.add_argument("--path", help="SQLite database file")
    cfg_sub.add_parser("path", help="Print config file location")

    return parser


# ── Dispatch ────────────────────────────────────────────────────────

_CommandHandler = Callable[[argparse.Namespace], Coroutine[Any, Any, None]]

_COMMAND_MAP: dict[str, _CommandHandler] = {
    "import": cmd_import,
    "profiles": cmd_profiles,
}

_CONFIG_MAP: dict[str, _CommandHandler] = {
    "show": cmd_config_show,
    "set-store": cmd_config_set_store,
    "path": cmd_config_path,
}


def main(argv: list[str] | None = None) -> None:
    import logging

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="  %(name)s: %(message)s",
        )
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    if not args.command:
        parser.print_help()
        return

    if args.command == "config":
        if not args.config_command:
            parser.parse_args(["config", "--help"])
            return
        handler = _CONFIG_MAP.get(args.config_command)
    else:
        handler = _COMMAND_MAP.get(args.command)

    if handler is None:
        parser.print_help()
        return

    try:
        asyncio.run(handler(args))
    except KeyboardInterrupt:
        print()
