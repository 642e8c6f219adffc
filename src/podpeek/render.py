# Text rendering of explorer snapshots.
# Created: 2026-10-18

from __future__ import annotations

from rich.text import Text
from rich.tree import Tree

from podpeek.explorer.models import Snapshot, TreeNode


def format_size(size: int | None) -> str:
    """Size in KB with one decimal; empty for unknown or zero sizes."""
    if not size:
        return ""
    return f"{size / 1024:.1f} KB"


def node_label(node: TreeNode) -> Text:
    if node.is_dir:
        marker = "⏳" if node.loading else ("▼" if node.expanded else "▶")
        label = Text(f"{marker} 📁 ")
        label.append(node.name, style="bold blue")
    else:
        label = Text("  📄 ")
        label.append(node.name)
        size = format_size(node.entry.size)
        if size:
            label.append(f"  {size}", style="dim")
    if node.last_error:
        label.append(f"  ({node.last_error})", style="red")
    return label


def _add_children(branch: Tree, nodes: Snapshot) -> None:
    for node in nodes:
        child = branch.add(node_label(node))
        if node.expanded and node.children:
            _add_children(child, node.children)


def render_tree(snapshot: Snapshot, title: str = "/") -> Tree:
    """Build a rich Tree showing expanded directories only."""
    tree = Tree(Text(title, style="bold"))
    if not snapshot:
        tree.add(Text("No files found", style="dim"))
        return tree
    _add_children(tree, snapshot)
    return tree
