"""Path-addressed tree updates.

Created: 2026-10-18

Every function takes a snapshot and returns a new one. Only the nodes on
the way down to the target are rebuilt; every other node, and every
untouched tuple of children, is the same object as before. When the target
path is missing, or the effect changes nothing, the input snapshot itself
is returned.

Directory-only effects (expanding, loading, children) leave file nodes
alone.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from podpeek.explorer.models import ROOT_PATH, Snapshot, TreeNode

Effect = Callable[[TreeNode], TreeNode]


def _may_contain(ancestor: str, path: str) -> bool:
    if ancestor == ROOT_PATH:
        return path.startswith(ROOT_PATH)
    return path.startswith(ancestor + "/")


def _update_node(node: TreeNode, path: str, effect: Effect) -> TreeNode:
    if node.path == path:
        return effect(node)
    if node.children is None or not _may_contain(node.path, path):
        return node
    children = _update_nodes(node.children, path, effect)
    if children is node.children:
        return node
    return replace(node, children=children)


def _update_nodes(nodes: Snapshot, path: str, effect: Effect) -> Snapshot:
    updated = tuple(_update_node(node, path, effect) for node in nodes)
    if all(new is old for new, old in zip(updated, nodes)):
        return nodes
    return updated


def update(snapshot: Snapshot, path: str, effect: Effect) -> Snapshot:
    """Apply *effect* to the node at *path*."""
    return _update_nodes(snapshot, path, effect)


def _directory_effect(effect: Effect) -> Effect:
    def apply(node: TreeNode) -> TreeNode:
        if not node.is_dir:
            return node
        return effect(node)

    return apply


def set_expanded(snapshot: Snapshot, path: str, value: bool) -> Snapshot:
    def effect(node: TreeNode) -> TreeNode:
        if node.expanded == value:
            return node
        return replace(node, expanded=value)

    return update(snapshot, path, _directory_effect(effect))


def begin_load(snapshot: Snapshot, path: str) -> Snapshot:
    return update(
        snapshot,
        path,
        _directory_effect(lambda node: replace(node, loading=True, last_error=None)),
    )


def apply_children(
    snapshot: Snapshot, path: str, children: tuple[TreeNode, ...]
) -> Snapshot:
    """Store freshly loaded children, replacing any previous ones outright."""
    return update(
        snapshot,
        path,
        _directory_effect(
            lambda node: replace(node, children=tuple(children), loading=False, last_error=None)
        ),
    )


def fail_load(snapshot: Snapshot, path: str, message: str) -> Snapshot:
    return update(
        snapshot,
        path,
        _directory_effect(lambda node: replace(node, loading=False, last_error=message)),
    )


def clear_error(snapshot: Snapshot, path: str) -> Snapshot:
    def effect(node: TreeNode) -> TreeNode:
        if node.last_error is None:
            return node
        return replace(node, last_error=None)

    return update(snapshot, path, effect)
