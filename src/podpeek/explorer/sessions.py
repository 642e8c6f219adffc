# Explorer session management
# Created: 2026-10-18
#
# One TreeController per open browsing session. Closing a session throws
# its tree away; nothing is persisted.
"""Explorer session management."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from podpeek.config import Settings, get_settings
from podpeek.errors import SessionNotFoundError
from podpeek.explorer.controller import TreeController
from podpeek.explorer.protocol import RemoteCommandRunner, TargetRef, TransferInitiator

logger = logging.getLogger(__name__)


@dataclass
class ExplorerSession:
    """An open browsing session and its controller."""

    session_id: str
    controller: TreeController
    _created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    _last_used_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def target(self) -> TargetRef:
        return self.controller.target

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def last_used_at(self) -> datetime:
        return self._last_used_at

    def touch(self) -> None:
        """Update last used timestamp."""
        self._last_used_at = datetime.now(tz=UTC)


class ExplorerSessionManager:
    """Opens, looks up and closes explorer sessions.

    Usage:
        manager = get_session_manager()
        session = await manager.open(PodTarget("default", "web-0", "app"))
        session.controller.toggle_expand("/etc")
        await manager.close_session(session.session_id)
    """

    def __init__(
        self,
        runner: RemoteCommandRunner,
        transfer: TransferInitiator,
        settings: Settings | None = None,
    ) -> None:
        self._runner = runner
        self._transfer = transfer
        self._settings = settings
        self._sessions: dict[str, ExplorerSession] = {}

    async def open(self, target: TargetRef, load_root: bool = True) -> ExplorerSession:
        """Create a session for *target* and, by default, load its root."""
        controller = TreeController(target, self._runner, self._transfer, settings=self._settings)
        session = ExplorerSession(session_id=uuid.uuid4().hex, controller=controller)
        self._sessions[session.session_id] = session
        logger.info("Opened explorer session %s for %s", session.session_id, target)

        if load_root:
            await controller.load_root()
        return session

    def get(self, session_id: str) -> ExplorerSession:
        """Return a session and mark it used.

        Raises:
            SessionNotFoundError: If no such session is open
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        session.touch()
        return session

    async def close_session(self, session_id: str) -> bool:
        """Close and remove a session. Returns False if it was not open."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        await session.controller.close()
        logger.info("Closed explorer session %s", session_id)
        return True

    async def cleanup_idle(self, timeout_seconds: int = 1800) -> int:
        """Close sessions idle for longer than *timeout_seconds*. Returns the count closed."""
        now = datetime.now(tz=UTC)
        idle = [
            session_id
            for session_id, session in list(self._sessions.items())
            if (now - session.last_used_at).total_seconds() > timeout_seconds
        ]
        for session_id in idle:
            await self.close_session(session_id)
        return len(idle)

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close_session(session_id)

    def list_sessions(self) -> list[str]:
        return list(self._sessions)

    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions


# Singleton instance
_manager_instance: ExplorerSessionManager | None = None


def get_session_manager() -> ExplorerSessionManager:
    """Get the process-wide session manager, backed by kubectl."""
    global _manager_instance
    if _manager_instance is None:
        from podpeek.kube import KubectlRunner, KubectlTransfer

        settings = get_settings()
        _manager_instance = ExplorerSessionManager(
            KubectlRunner.from_settings(settings),
            KubectlTransfer.from_settings(settings),
            settings=settings,
        )
    return _manager_instance


def reset_session_manager() -> None:
    """Forget the singleton (for tests)."""
    global _manager_instance
    _manager_instance = None


__all__ = [
    "ExplorerSession",
    "ExplorerSessionManager",
    "get_session_manager",
    "reset_session_manager",
]
