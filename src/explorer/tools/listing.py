"""
Text rendering for the File Explorer console.

Produces the directory listing table and the command menu. Column padding is
applied before any colour codes, so output with the escape sequences removed
matches the plain layout exactly.
"""

from pathlib import Path
from typing import Iterable, List, Union

import typer

from ..models.entries import DirectoryEntry, EntryKind


COLUMN_WIDTHS = (8, 12, 12, 24)
HEADERS = ("TYPE", "PERMS", "SIZE(B)", "MODIFIED", "NAME")
RULE = "-" * 60

_KIND_COLORS = {
    EntryKind.DIRECTORY: typer.colors.BLUE,
    EntryKind.SYMLINK: typer.colors.CYAN,
}

MENU_ITEMS = [
    ("1", "List current directory"),
    ("2", "Enter directory"),
    ("3", "Go up (..)"),
    ("4", "Create file"),
    ("5", "Create directory"),
    ("6", "Delete file/directory"),
    ("7", "Copy file/directory"),
    ("8", "Move/Rename file/directory"),
    ("9", "Search by name (recursive)"),
    ("0", "Exit"),
]


def _pad(values: Iterable[str]) -> str:
    return "".join(value.ljust(width) for value, width in zip(values, COLUMN_WIDTHS))


def format_header() -> List[str]:
    """Return the rule, column header and rule lines."""
    return [RULE, _pad(HEADERS[:4]) + HEADERS[4], RULE]


def format_entry(entry: DirectoryEntry, color: bool = False) -> str:
    """
    Render one listing row.

    Args:
        entry: Entry to render
        color: Whether to colour the TYPE cell

    Returns:
        The row without a trailing newline
    """
    type_cell = entry.kind.label.ljust(COLUMN_WIDTHS[0])
    if color and entry.kind in _KIND_COLORS:
        type_cell = typer.style(type_cell, fg=_KIND_COLORS[entry.kind], bold=True)
    rest = "".join(value.ljust(width) for value, width in
                   zip((entry.permissions, str(entry.size), entry.modified), COLUMN_WIDTHS[1:]))
    return type_cell + rest + entry.name


def format_listing(directory: Union[str, Path], entries: Iterable[DirectoryEntry],
                   color: bool = False) -> str:
    """Render the full listing block for a directory."""
    lines = ["", f"Current Directory: {directory}"]
    lines.extend(format_header())
    lines.extend(format_entry(entry, color) for entry in entries)
    return "\n".join(lines)


def format_menu() -> str:
    """Render the numbered command menu."""
    lines = ["", "Commands:"]
    lines.extend(f"{key}. {label}" for key, label in MENU_ITEMS)
    return "\n".join(lines)
