# Error types shared by the explorer core and its collaborators.
# Created: 2026-10-18

from __future__ import annotations


class PodpeekError(Exception):
    """Base class for podpeek errors."""


class TransportError(PodpeekError):
    """A remote command or file copy failed.

    Carries a human-readable message plus, when the failure came from a
    child process, its exit code and captured stderr.
    """

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.message = message
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        return self.message


class RemoteTimeoutError(TransportError):
    """A remote call did not finish within its timeout."""

    def __init__(self, message: str, *, timeout: float):
        super().__init__(message)
        self.timeout = timeout


class SessionLoadError(PodpeekError):
    """The root listing of a browsing session failed."""


class SessionNotFoundError(PodpeekError):
    """No browsing session exists for the given id."""

    def __init__(self, session_id: str):
        super().__init__(f"Unknown explorer session: {session_id}")
        self.session_id = session_id
