"""Tree controller - owns the current snapshot of one browsing session.

Created: 2026-10-18

The controller is the only writer of its snapshot. Every change is a single
assignment of a new immutable snapshot, so readers never see a half-applied
update and no locks are needed. Remote calls run as asyncio tasks and
report back by path; if the node is gone by then, the mutator simply leaves
the snapshot as it is.

Per-path load states:

    Unloaded -> Loading -> Loaded | Failed
    Failed   -> Loading               (user expands again)

Usage:
    controller = TreeController(target, runner, transfer)
    await controller.load_root()
    task = controller.toggle_expand("/var")   # schedules the load
    await controller.wait_idle()
    result = await controller.download("/var/log/syslog")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from podpeek.config import Settings, get_settings
from podpeek.errors import RemoteTimeoutError, SessionLoadError, TransportError
from podpeek.explorer import mutator
from podpeek.explorer.listing import parse_listing
from podpeek.explorer.models import ROOT_PATH, Snapshot, TreeNode, find_node
from podpeek.explorer.protocol import (
    RemoteCommandRunner,
    TargetRef,
    TransferInitiator,
    listing_argv,
)

logger = logging.getLogger(__name__)

Listener = Callable[[Snapshot], Any]


@dataclass(frozen=True)
class DownloadResult:
    """Outcome of a single download."""

    ok: bool
    message: str
    destination: Path | None = None


def download_name(path: str, default: str = "download") -> str:
    """Local file name for a remote path: its last segment, or *default*."""
    name = path.split("/")[-1]
    if name in ("", ".", ".."):
        return default
    return name


class TreeController:
    """Drives expand/collapse/download for one remote target."""

    def __init__(
        self,
        target: TargetRef,
        runner: RemoteCommandRunner,
        transfer: TransferInitiator,
        settings: Settings | None = None,
    ):
        """Initialize the controller.

        Args:
            target: Passed unchanged to the runner and transfer
            runner: Executes listing commands
            transfer: Copies files for downloads
            settings: Optional settings. Uses get_settings() if not provided.
        """
        self.target = target
        self._runner = runner
        self._transfer = transfer
        self._settings = settings or get_settings()

        self._snapshot: Snapshot = ()
        self._in_flight: set[str] = set()
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []

        self.session_error: SessionLoadError | None = None
        self.root_loaded = False
        self.root_loading = False

    # =========================================================================
    # Snapshot access
    # =========================================================================

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def is_loading(self, path: str) -> bool:
        return path in self._in_flight

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with every new snapshot. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, snapshot: Snapshot) -> None:
        if snapshot is self._snapshot:
            return
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.warning("Snapshot listener failed", exc_info=True)

    # =========================================================================
    # Loading
    # =========================================================================

    async def _list(self, path: str) -> str:
        timeout = self._settings.load_timeout
        try:
            return await asyncio.wait_for(
                self._runner.run(self.target, listing_argv(path)), timeout=timeout
            )
        except asyncio.TimeoutError:
            raise RemoteTimeoutError(
                f"Listing {path} timed out after {timeout:g}s", timeout=timeout
            ) from None

    async def load_root(self) -> bool:
        """Load the contents of ``/``. Only the first call does anything.

        Returns:
            True if the root is loaded
        """
        if self.root_loaded or self.root_loading:
            return self.root_loaded

        self.root_loading = True
        self.session_error = None
        try:
            output = await self._list(ROOT_PATH)
        except TransportError as e:
            logger.warning("Root listing failed for %s: %s", self.target, e)
            self.session_error = SessionLoadError(str(e))
            self._commit(())
            return False
        except Exception as e:
            logger.exception("Unexpected error listing root for %s", self.target)
            self.session_error = SessionLoadError(f"Unexpected error: {e}")
            self._commit(())
            return False
        finally:
            self.root_loading = False

        nodes = tuple(TreeNode.from_entry(entry) for entry in parse_listing(output, ROOT_PATH))
        self.root_loaded = True
        self._commit(nodes)
        logger.info("Loaded %d root entries for %s", len(nodes), self.target)
        return True

    def toggle_expand(self, path: str) -> asyncio.Task | None:
        """Flip a directory open or closed.

        Opening a directory that has no loaded children starts a load in
        the background. Closing keeps the cached children.

        Returns:
            The load task when one was started, else None
        """
        node = find_node(self._snapshot, path)
        if node is None or not node.is_dir:
            return None

        expanding = not node.expanded
        self._commit(mutator.set_expanded(self._snapshot, path, expanding))

        if expanding and node.children is None and self._begin_load(path):
            return self._spawn(self._load(path))
        return None

    def _begin_load(self, path: str) -> bool:
        if path in self._in_flight:
            logger.debug("Load already in flight for %s", path)
            return False

        node = find_node(self._snapshot, path)
        if node is None or not node.is_dir:
            logger.debug("Ignoring load for unknown directory %s", path)
            return False

        self._in_flight.add(path)
        self._commit(mutator.begin_load(self._snapshot, path))
        return True

    async def expand_and_load(self, path: str) -> None:
        """Load the children of *path*.

        Only loads; the expanded flag is left as it is (toggle_expand sets
        it). No-op while a load for the same path is in flight, or when the
        path is not a directory in the current snapshot.
        """
        if self._begin_load(path):
            await self._load(path)

    async def _load(self, path: str) -> None:
        try:
            output = await self._list(path)
        except TransportError as e:
            logger.warning("Listing %s failed: %s", path, e)
            self._commit(mutator.fail_load(self._snapshot, path, str(e)))
            return
        except asyncio.CancelledError:
            self._commit(mutator.fail_load(self._snapshot, path, "Load cancelled"))
            raise
        except Exception as e:
            logger.exception("Unexpected error listing %s", path)
            self._commit(mutator.fail_load(self._snapshot, path, f"Unexpected error: {e}"))
            return
        finally:
            self._in_flight.discard(path)

        children = tuple(TreeNode.from_entry(entry) for entry in parse_listing(output, path))
        self._commit(mutator.apply_children(self._snapshot, path, children))
        logger.debug("Loaded %d entries under %s", len(children), path)

    def collapse(self, path: str) -> None:
        self._commit(mutator.set_expanded(self._snapshot, path, False))

    def dismiss_error(self, path: str) -> None:
        self._commit(mutator.clear_error(self._snapshot, path))

    # =========================================================================
    # Downloads
    # =========================================================================

    async def download(self, path: str, destination_dir: Path | None = None) -> DownloadResult:
        """Copy one remote file into the download directory.

        Never touches the tree, so it can run alongside any load.
        """
        settings = self._settings
        name = download_name(path, settings.default_download_name)
        destination = (destination_dir or settings.download_dir).expanduser().resolve() / name
        timeout = settings.copy_timeout

        try:
            await asyncio.wait_for(
                self._transfer.copy(self.target, path, str(destination)), timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Download of %s timed out after %gs", path, timeout)
            return DownloadResult(ok=False, message=f"Download failed: timed out after {timeout:g}s")
        except TransportError as e:
            logger.warning("Download of %s failed: %s", path, e)
            return DownloadResult(ok=False, message=f"Download failed: {e}")
        except Exception as e:
            logger.exception("Unexpected error downloading %s", path)
            return DownloadResult(ok=False, message=f"Download failed: unexpected error: {e}")

        logger.info("Downloaded %s to %s", path, destination)
        return DownloadResult(
            ok=True, message=f"File downloaded to {destination}", destination=destination
        )

    # =========================================================================
    # Task bookkeeping
    # =========================================================================

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for every background load started so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel pending loads and drop all listeners."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        # Tasks cancelled before their first step never reach _load's handlers.
        for path in list(self._in_flight):
            self._commit(mutator.fail_load(self._snapshot, path, "Load cancelled"))
        self._in_flight.clear()
        self._listeners.clear()
