"""Lazy remote directory tree.

Created: 2026-10-18

Pieces, leaf first:

- listing: parses long-form ``ls`` output into entries
- models: entries, tree nodes and snapshots
- mutator: path-addressed snapshot updates with structural sharing
- controller: owns a session's snapshot and talks to the remote side
- sessions: keeps one controller per open browsing session
"""

from podpeek.explorer.controller import DownloadResult, TreeController, download_name
from podpeek.explorer.listing import parse_listing
from podpeek.explorer.models import (
    ROOT_PATH,
    Entry,
    EntryKind,
    NodeState,
    Snapshot,
    TreeNode,
    find_node,
    iter_nodes,
    join_path,
)
from podpeek.explorer.protocol import RemoteCommandRunner, TransferInitiator, listing_argv
from podpeek.explorer.sessions import (
    ExplorerSession,
    ExplorerSessionManager,
    get_session_manager,
    reset_session_manager,
)

__all__ = [
    "ROOT_PATH",
    "DownloadResult",
    "Entry",
    "EntryKind",
    "ExplorerSession",
    "ExplorerSessionManager",
    "NodeState",
    "RemoteCommandRunner",
    "Snapshot",
    "TransferInitiator",
    "TreeController",
    "TreeNode",
    "download_name",
    "find_node",
    "get_session_manager",
    "iter_nodes",
    "join_path",
    "listing_argv",
    "parse_listing",
    "reset_session_manager",
]
