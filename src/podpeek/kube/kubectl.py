"""kubectl-backed runner and transfer.

Created: 2026-10-18

Both collaborators launch kubectl with ``asyncio.create_subprocess_exec``,
so every argument (remote paths included) reaches kubectl as its own argv
element and no local shell is involved. ``kubectl exec`` hands the command
after ``--`` to the container runtime as an argument vector as well, so a
path with spaces or quotes arrives intact.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

from podpeek.config import Settings
from podpeek.errors import RemoteTimeoutError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PodTarget:
    """A container inside a pod."""

    namespace: str
    pod: str
    container: str

    def describe(self) -> str:
        return f"{self.namespace}/{self.pod}:{self.container}"

    def __str__(self) -> str:
        return self.describe()


def shell_join(argv: list[str]) -> str:
    """POSIX-quoted rendering of *argv*, for logs and shell-based transports."""
    return shlex.join(argv)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        pass  # Already exited
    await proc.wait()


async def run_process(argv: list[str], timeout: float | None = None) -> str:
    """Run *argv* locally and return its stdout.

    Raises:
        TransportError: If the program cannot start or exits non-zero
        RemoteTimeoutError: If it runs longer than *timeout* seconds
    """
    logger.debug("Running: %s", shell_join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise TransportError(f"Could not start {argv[0]}: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.CancelledError:
        # Cancelled by an outer timeout or session close; the child must not outlive us.
        await _kill(proc)
        raise
    except asyncio.TimeoutError:
        await _kill(proc)
        raise RemoteTimeoutError(
            f"{argv[0]} timed out after {timeout:g}s", timeout=timeout or 0.0
        ) from None

    if proc.returncode != 0:
        err = stderr.decode("utf-8", errors="replace").strip()
        raise TransportError(
            err or f"{argv[0]} exited with code {proc.returncode}",
            returncode=proc.returncode,
            stderr=err,
        )
    return stdout.decode("utf-8", errors="replace")


class _KubectlBase:
    def __init__(
        self,
        kubectl_path: str = "kubectl",
        kubeconfig: str | None = None,
        context: str | None = None,
        timeout: float | None = None,
    ):
        self.kubectl_path = kubectl_path
        self.kubeconfig = kubeconfig
        self.context = context
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings):
        return cls(
            kubectl_path=settings.kubectl_path,
            kubeconfig=settings.kubeconfig,
            context=settings.kube_context,
        )

    def base_argv(self) -> list[str]:
        argv = [self.kubectl_path]
        if self.kubeconfig:
            argv += ["--kubeconfig", self.kubeconfig]
        if self.context:
            argv += ["--context", self.context]
        return argv


class KubectlRunner(_KubectlBase):
    """Runs commands in a container with ``kubectl exec``."""

    def exec_argv(self, target: PodTarget, argv: list[str]) -> list[str]:
        return [
            *self.base_argv(),
            "exec",
            "-n",
            target.namespace,
            target.pod,
            "-c",
            target.container,
            "--",
            *argv,
        ]

    async def run(self, target: PodTarget, argv: list[str]) -> str:
        return await run_process(self.exec_argv(target, argv), timeout=self.timeout)


class KubectlTransfer(_KubectlBase):
    """Copies a file out of a container with ``kubectl cp``."""

    def copy_argv(self, target: PodTarget, remote_path: str, local_destination: str) -> list[str]:
        return [
            *self.base_argv(),
            "cp",
            f"{target.namespace}/{target.pod}:{remote_path}",
            local_destination,
            "-c",
            target.container,
        ]

    async def copy(self, target: PodTarget, remote_path: str, local_destination: str) -> None:
        try:
            Path(local_destination).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TransportError(f"Cannot create download directory: {e}") from e
        await run_process(
            self.copy_argv(target, remote_path, local_destination), timeout=self.timeout
        )
