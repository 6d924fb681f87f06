# /// script
# requires-python = ">=3.12"
# dependencies = ["notes-restore"]
# [tool.uv.sources]
# notes-restore = { path = ".", editable = true }
# ///

"""Quick start demo for notes_restore.

Usage:
    uv run quickstart.py ~/downloads/backup.zip
    uv run quickstart.py ~/downloads/backup.zip --db ./restored.db
    uv run quickstart.py ~/keys/private.asc
"""

import argparse
import asyncio
import logging
from pathlib import Path

from notes_restore import Collection, ImportCompleted, ImportEvent, NotesRestore
from notes_restore.store.sql import SqlStore

parser = argparse.ArgumentParser(description="notes-restore quickstart")
parser.add_argument("path", help="Path to a .zip export or an .asc private key")
parser.add_argument("--db", default="./data/notes.db", help="SQLite database file")
args = parser.parse_args()

logging.basicConfig(level=logging.INFO, format="  %(name)s: %(message)s")


def on_event(event: ImportEvent) -> None:
    if isinstance(event, ImportCompleted) and event.error is not None:
        print(f"Import failed: {event.error}")


async def main() -> None:
    Path(args.db).parent.mkdir(parents=True, exist_ok=True)
    app = NotesRestore(store=SqlStore.sqlite(args.db))
    await app.init()

    result = await app.restore_path(args.path, listeners=[on_event])
    print(f"{result.status}: {result.records_imported} records")

    for profile_id in await app.store.list_profiles():
        notes = await app.store.get_records(Collection.NOTES, profile_id)
        print(f"  {profile_id}: {len(notes)} notes")

    await app.close()


asyncio.run(main())
