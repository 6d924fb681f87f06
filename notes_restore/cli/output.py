"""Console rendering for the notes-restore CLI.

Colors are plain ANSI escapes; they are left out when stdout is not a
terminal or ``NO_COLOR`` is set.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping

_STYLES = {
    "bold": "1",
    "dim": "2",
    "red": "31",
    "green": "32",
    "cyan": "36",
}

_ENABLED = not os.environ.get("NO_COLOR") and getattr(sys.stdout, "isatty", bool)()


def style(text: str, name: str) -> str:
    if not _ENABLED:
        return text
    return f"\033[{_STYLES[name]}m{text}\033[0m"


def bold(text: str) -> str:
    return style(text, "bold")


def dim(text: str) -> str:
    return style(text, "dim")


def header(title: str) -> None:
    print(f"\n{bold(title)}")


def success(msg: str) -> None:
    print(f"  {style('✓', 'green')} {msg}")


def error(msg: str) -> None:
    print(f"  {style('✗', 'red')} {msg}")


def info(msg: str) -> None:
    print(f"  {msg}")


def kv(key: str, value: object, indent: int = 2) -> None:
    print(f"{' ' * indent}{dim(f'{key}:')}  {value}")


def counts(breakdown: Mapping[str, int], indent: int = 4) -> None:
    """One line per collection, sorted by name, thousands separated."""
    for collection, n in sorted(breakdown.items()):
        kv(collection, f"{n:,}", indent=indent)


def next_step(command: str, description: str = "") -> None:
    suffix = f"  {dim(description)}" if description else ""
    print(f"    {style(command, 'cyan')}{suffix}")
