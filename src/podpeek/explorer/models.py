"""Explorer data model: listing entries, tree nodes and snapshots.

Created: 2026-10-18

Design notes:
- Every type here is a frozen dataclass so a snapshot can be shared freely
  between the controller, its listeners and the HTTP layer.
- ``children is None`` means "never loaded"; an empty tuple means "loaded
  and empty".
- A snapshot is a plain tuple of root-level nodes (the contents of ``/``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

ROOT_PATH = "/"


class EntryKind(str, Enum):
    """What a listing line describes."""

    FILE = "file"
    DIRECTORY = "directory"


class NodeState(str, Enum):
    """Load state of a directory node."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


def join_path(parent: str, name: str) -> str:
    """Join a base name onto an absolute parent path."""
    if parent == ROOT_PATH:
        return ROOT_PATH + name
    return f"{parent}/{name}"


@dataclass(frozen=True)
class Entry:
    """One filesystem object as reported by a directory listing.

    Attributes:
        name: Base name, never "." or ".."
        path: Absolute, forward-slash separated path
        kind: File or directory
        size: Size in bytes, files only, None when the listing had no number
        permissions: Raw permission token, for display only
    """

    name: str
    path: str
    kind: EntryKind
    size: int | None = None
    permissions: str = ""

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class TreeNode:
    """An entry plus its exploration state."""

    entry: Entry
    expanded: bool = False
    children: tuple[TreeNode, ...] | None = None
    loading: bool = False
    last_error: str | None = None

    @classmethod
    def from_entry(cls, entry: Entry) -> TreeNode:
        return cls(entry=entry)

    @property
    def path(self) -> str:
        return self.entry.path

    @property
    def name(self) -> str:
        return self.entry.name

    @property
    def is_dir(self) -> bool:
        return self.entry.is_dir

    @property
    def state(self) -> NodeState:
        if self.loading:
            return NodeState.LOADING
        if self.last_error is not None:
            return NodeState.FAILED
        if self.children is None:
            return NodeState.UNLOADED
        return NodeState.LOADED


# The root-level nodes of a tree.
Snapshot = tuple[TreeNode, ...]


def iter_nodes(snapshot: Snapshot):
    """Yield every node in depth-first order, including collapsed subtrees."""
    for node in snapshot:
        yield node
        if node.children is not None:
            yield from iter_nodes(node.children)


def find_node(snapshot: Snapshot, path: str) -> TreeNode | None:
    """Return the node at *path*, or None."""
    for node in iter_nodes(snapshot):
        if node.path == path:
            return node
    return None
