# Explorer schemas.
# Created: 2026-10-18

from __future__ import annotations

from pydantic import BaseModel, Field

from podpeek.explorer.models import TreeNode
from podpeek.explorer.sessions import ExplorerSession
from podpeek.render import format_size


class OpenSessionRequest(BaseModel):
    """Container to browse."""

    namespace: str = Field(min_length=1)
    pod: str = Field(min_length=1)
    container: str = Field(min_length=1)


class PathRequest(BaseModel):
    """A remote path inside a session."""

    path: str = Field(min_length=1)


class NodeView(BaseModel):
    """One node of the tree. ``children`` is null until the directory is loaded."""

    name: str
    path: str
    isDir: bool
    size: int | None = None
    sizeDisplay: str = ""
    permissions: str = ""
    expanded: bool = False
    loading: bool = False
    error: str | None = None
    children: list[NodeView] | None = None

    @classmethod
    def from_node(cls, node: TreeNode) -> NodeView:
        entry = node.entry
        return cls(
            name=entry.name,
            path=entry.path,
            isDir=entry.is_dir,
            size=entry.size,
            sizeDisplay="" if entry.is_dir else format_size(entry.size),
            permissions=entry.permissions,
            expanded=node.expanded,
            loading=node.loading,
            error=node.last_error,
            children=(
                None if node.children is None else [cls.from_node(c) for c in node.children]
            ),
        )


class SessionView(BaseModel):
    """A browsing session and its current tree."""

    id: str
    namespace: str
    pod: str
    container: str
    rootLoaded: bool = False
    error: str | None = None
    files: list[NodeView] = []

    @classmethod
    def from_session(cls, session: ExplorerSession) -> SessionView:
        controller = session.controller
        target = session.target
        return cls(
            id=session.session_id,
            namespace=target.namespace,
            pod=target.pod,
            container=target.container,
            rootLoaded=controller.root_loaded,
            error=str(controller.session_error) if controller.session_error else None,
            files=[NodeView.from_node(n) for n in controller.snapshot],
        )


class DownloadResponse(BaseModel):
    """Download result."""

    ok: bool
    message: str
    destination: str | None = None
