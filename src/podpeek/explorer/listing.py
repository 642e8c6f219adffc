# Listing parser - turns long-form directory listing text into entries.
# Created: 2026-10-18
#
# Expected line shape (ls -la):
#   drwxr-xr-x  2 root root 4096 Jan  1 00:00 var
#   -rw-r--r--  1 root root  120 Jan  1 00:00 my file.txt
#
# The name is everything from the ninth column on, rejoined with single
# spaces. Runs of spaces inside a name collapse to one; that is a known
# limitation of this format and nothing here tries to guess around it.

from __future__ import annotations

import logging

from podpeek.explorer.models import Entry, EntryKind, join_path

logger = logging.getLogger(__name__)

MIN_FIELDS = 9
_PERMISSIONS = 0
_SIZE = 4
_NAME = 8

_SKIP_NAMES = frozenset({".", ".."})


def _parse_size(token: str) -> int | None:
    try:
        size = int(token, 10)
    except ValueError:
        # Device files report "major, minor" here.
        return None
    return size if size >= 0 else None


def parse_line(line: str, parent_path: str) -> Entry | None:
    """Parse one listing line. Returns None for lines that should be skipped."""
    if not line.strip() or line.lstrip().startswith("total"):
        return None

    parts = line.split()
    if len(parts) < MIN_FIELDS:
        logger.debug("Skipping malformed listing line: %r", line)
        return None

    permissions = parts[_PERMISSIONS]
    name = " ".join(parts[_NAME:])
    if name in _SKIP_NAMES:
        return None

    kind = EntryKind.DIRECTORY if permissions.startswith("d") else EntryKind.FILE
    size = None if kind is EntryKind.DIRECTORY else _parse_size(parts[_SIZE])

    return Entry(
        name=name,
        path=join_path(parent_path, name),
        kind=kind,
        size=size,
        permissions=permissions,
    )


def parse_listing(raw_output: str, parent_path: str) -> list[Entry]:
    """Parse a whole listing for the directory at *parent_path*.

    Never raises. Malformed lines are dropped; empty or non-string input
    yields an empty list. Order follows the input.
    """
    if not isinstance(raw_output, str) or not raw_output:
        return []

    entries = []
    for line in raw_output.splitlines():
        entry = parse_line(line, parent_path)
        if entry is not None:
            entries.append(entry)
    return entries
