# Explorer router - open sessions, expand/collapse, download.
# Created: 2026-10-18
#
# The tree is served by polling: toggling a directory returns right away
# with the node marked as loading, and GET on the session shows the result
# once the listing has come back. Pass ?wait=true to block until then.

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from podpeek.api.v1.schemas.explorer import (
    DownloadResponse,
    OpenSessionRequest,
    PathRequest,
    SessionView,
)
from podpeek.errors import SessionNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Explorer"])


def _get_session(session_id: str):
    from podpeek.explorer.sessions import get_session_manager

    try:
        return get_session_manager().get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("/explorer/sessions", response_model=SessionView)
async def open_session(body: OpenSessionRequest):
    """Open a browsing session for a container and load its root directory."""
    from podpeek.explorer.sessions import get_session_manager
    from podpeek.kube import PodTarget

    target = PodTarget(namespace=body.namespace, pod=body.pod, container=body.container)
    session = await get_session_manager().open(target)
    return SessionView.from_session(session)


@router.get("/explorer/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str):
    """Current tree for a session."""
    return SessionView.from_session(_get_session(session_id))


@router.post("/explorer/sessions/{session_id}/toggle", response_model=SessionView)
async def toggle_node(session_id: str, body: PathRequest, wait: bool = False):
    """Expand or collapse a directory, loading it on first expand."""
    session = _get_session(session_id)
    task = session.controller.toggle_expand(body.path)
    if task is not None and wait:
        await task
    return SessionView.from_session(session)


@router.post("/explorer/sessions/{session_id}/download", response_model=DownloadResponse)
async def download_file(session_id: str, body: PathRequest):
    """Copy a remote file into the local download directory."""
    session = _get_session(session_id)
    result = await session.controller.download(body.path)
    return DownloadResponse(
        ok=result.ok,
        message=result.message,
        destination=str(result.destination) if result.destination else None,
    )


@router.delete("/explorer/sessions/{session_id}")
async def close_session(session_id: str):
    """Close a session and discard its tree."""
    from podpeek.explorer.sessions import get_session_manager

    closed = await get_session_manager().close_session(session_id)
    if not closed:
        raise HTTPException(status_code=404, detail=f"Unknown explorer session: {session_id}")
    return {"status": "ok"}
