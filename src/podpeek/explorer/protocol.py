# Collaborator protocols for the explorer core.
# Created: 2026-10-18
#
# The core never builds shell strings. Remote paths are always passed as
# one element of an argument vector; any quoting a transport needs is the
# transport's job.

from __future__ import annotations

from typing import Any, Protocol

# Whatever a concrete runner needs to address its target (for kubectl, a
# namespace/pod/container triple). The core only passes it through.
TargetRef = Any


class RemoteCommandRunner(Protocol):
    """Runs one command inside a remote target."""

    async def run(self, target: TargetRef, argv: list[str]) -> str:
        """Run *argv* in *target* and return its standard output.

        Raises:
            TransportError: On non-zero exit or transport failure.
        """
        ...


class TransferInitiator(Protocol):
    """Copies a single remote file to the local machine."""

    async def copy(self, target: TargetRef, remote_path: str, local_destination: str) -> None:
        """Copy *remote_path* from *target* to the absolute *local_destination*.

        Raises:
            TransportError: If the copy fails.
        """
        ...


def listing_argv(path: str) -> list[str]:
    """Long-form, hidden-including, non-recursive listing of *path*.

    Sizes are exact byte counts so the size column parses as an integer.
    """
    return ["ls", "-la", "--", path]
