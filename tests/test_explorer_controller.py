# Tests for the tree controller.
# Created: 2026-10-18

import asyncio
from pathlib import Path

import pytest

from podpeek.config import Settings
from podpeek.errors import TransportError
from podpeek.explorer.controller import TreeController, download_name
from podpeek.explorer.models import NodeState, find_node

ROOT_LS = (
    "total 12\n"
    "drwxr-xr-x 2 root root 4096 Jan 1 00:00 etc\n"
    "drwxr-xr-x 2 root root 4096 Jan 1 00:00 var\n"
    "drwxr-xr-x 2 root root 4096 Jan 1 00:00 it's \"here\"\n"
    "-rw-r--r-- 1 root root 120 Jan 1 00:00 readme.txt\n"
)

VAR_LS = (
    "drwxr-xr-x 2 root root 4096 Jan 1 00:00 log\n"
    "-rw-r--r-- 1 root root 10 Jan 1 00:00 my notes.txt\n"
)


class FakeRunner:
    """In-memory runner keyed by the listed path."""

    def __init__(self, listings=None, errors=None):
        self.listings = dict(listings or {})
        self.errors = dict(errors or {})
        self.calls: list[list[str]] = []
        self.gate: asyncio.Event | None = None

    async def run(self, target, argv):
        self.calls.append(list(argv))
        path = argv[-1]
        if self.gate is not None:
            await self.gate.wait()
        if path in self.errors:
            raise TransportError(self.errors[path])
        return self.listings.get(path, "total 0\n")

    def calls_for(self, path):
        return [c for c in self.calls if c[-1] == path]


class FakeTransfer:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def copy(self, target, remote_path, local_destination):
        self.calls.append((target, remote_path, local_destination))
        if self.error:
            raise TransportError(self.error)


@pytest.fixture
def settings(tmp_path):
    return Settings(download_dir=tmp_path, load_timeout=5.0, copy_timeout=5.0)


@pytest.fixture
def runner():
    return FakeRunner({"/": ROOT_LS, "/var": VAR_LS})


@pytest.fixture
def transfer():
    return FakeTransfer()


@pytest.fixture
def controller(runner, transfer, settings):
    return TreeController("ns/pod:app", runner, transfer, settings=settings)


class TestLoadRoot:
    """Tests for load_root()."""

    @pytest.mark.asyncio
    async def test_success(self, controller, runner):
        assert await controller.load_root() is True
        assert runner.calls == [["ls", "-la", "--", "/"]]
        assert [n.name for n in controller.snapshot] == ["etc", "var", 'it\'s "here"', "readme.txt"]
        assert controller.root_loaded is True
        assert controller.session_error is None

    @pytest.mark.asyncio
    async def test_failure_sets_session_error(self, transfer, settings):
        runner = FakeRunner(errors={"/": "pod not found"})
        controller = TreeController("t", runner, transfer, settings=settings)

        assert await controller.load_root() is False
        assert controller.snapshot == ()
        assert "pod not found" in str(controller.session_error)

    @pytest.mark.asyncio
    async def test_only_runs_once(self, controller, runner):
        await controller.load_root()
        await controller.load_root()
        assert len(runner.calls) == 1


class TestToggleExpand:
    """Tests for toggle_expand() and expand_and_load()."""

    @pytest.mark.asyncio
    async def test_first_expand_loads(self, controller, runner):
        await controller.load_root()
        task = controller.toggle_expand("/var")
        assert task is not None

        node = find_node(controller.snapshot, "/var")
        assert node.expanded is True
        assert node.loading is True

        await task
        node = find_node(controller.snapshot, "/var")
        assert node.loading is False
        assert node.state == NodeState.LOADED
        assert [c.path for c in node.children] == ["/var/log", "/var/my notes.txt"]

    @pytest.mark.asyncio
    async def test_collapse_keeps_children_and_reexpand_does_not_reload(self, controller, runner):
        await controller.load_root()
        await controller.toggle_expand("/var")

        assert controller.toggle_expand("/var") is None
        node = find_node(controller.snapshot, "/var")
        assert node.expanded is False
        assert node.children is not None

        assert controller.toggle_expand("/var") is None
        assert find_node(controller.snapshot, "/var").expanded is True
        assert len(runner.calls_for("/var")) == 1

    @pytest.mark.asyncio
    async def test_at_most_one_inflight_load(self, controller, runner):
        await controller.load_root()
        runner.gate = asyncio.Event()

        first = asyncio.create_task(controller.expand_and_load("/var"))
        await asyncio.sleep(0)
        assert controller.is_loading("/var")

        await controller.expand_and_load("/var")
        runner.gate.set()
        await first

        assert len(runner.calls_for("/var")) == 1
        assert not controller.is_loading("/var")

    @pytest.mark.asyncio
    async def test_different_paths_load_independently(self, controller, runner):
        runner.errors["/etc"] = "permission denied"
        await controller.load_root()

        controller.toggle_expand("/etc")
        controller.toggle_expand("/var")
        await controller.wait_idle()

        etc = find_node(controller.snapshot, "/etc")
        var = find_node(controller.snapshot, "/var")
        assert etc.state == NodeState.FAILED
        assert etc.last_error == "permission denied"
        assert etc.children is None
        assert var.state == NodeState.LOADED

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, controller, runner):
        runner.errors["/var"] = "connection refused"
        await controller.load_root()
        await controller.toggle_expand("/var")
        assert find_node(controller.snapshot, "/var").last_error == "connection refused"

        del runner.errors["/var"]
        controller.toggle_expand("/var")  # collapse
        task = controller.toggle_expand("/var")
        assert task is not None
        assert find_node(controller.snapshot, "/var").last_error is None
        await task

        node = find_node(controller.snapshot, "/var")
        assert node.state == NodeState.LOADED
        assert len(runner.calls_for("/var")) == 2

    @pytest.mark.asyncio
    async def test_timeout_fails_node(self, runner, transfer, tmp_path):
        settings = Settings(download_dir=tmp_path, load_timeout=0.05)
        controller = TreeController("t", runner, transfer, settings=settings)
        await controller.load_root()

        runner.gate = asyncio.Event()
        await controller.toggle_expand("/var")

        node = find_node(controller.snapshot, "/var")
        assert node.loading is False
        assert "timed out" in node.last_error
        runner.gate.set()

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_leave_node_loading(self, controller, runner):
        await controller.load_root()

        async def broken(target, argv):
            raise ValueError("bad output")

        runner.run = broken
        await controller.toggle_expand("/var")

        node = find_node(controller.snapshot, "/var")
        assert node.loading is False
        assert "bad output" in node.last_error

    @pytest.mark.asyncio
    async def test_path_with_quotes_is_one_argument(self, controller, runner):
        await controller.load_root()
        await controller.toggle_expand('/it\'s "here"')
        assert runner.calls[-1] == ["ls", "-la", "--", '/it\'s "here"']

    @pytest.mark.asyncio
    async def test_file_and_unknown_paths_ignored(self, controller, runner):
        await controller.load_root()
        before = controller.snapshot

        assert controller.toggle_expand("/readme.txt") is None
        assert controller.toggle_expand("/missing") is None
        await controller.expand_and_load("/missing")

        assert controller.snapshot is before
        assert len(runner.calls) == 1

    @pytest.mark.asyncio
    async def test_close_cancels_pending_load(self, controller, runner):
        await controller.load_root()
        runner.gate = asyncio.Event()
        controller.toggle_expand("/var")
        await asyncio.sleep(0)

        await controller.close()
        node = find_node(controller.snapshot, "/var")
        assert node.loading is False
        assert node.last_error == "Load cancelled"


class TestSubscribe:
    """Tests for snapshot listeners."""

    @pytest.mark.asyncio
    async def test_listener_sees_each_snapshot(self, controller):
        seen = []
        unsubscribe = controller.subscribe(seen.append)

        await controller.load_root()
        await controller.toggle_expand("/var")
        assert seen[-1] is controller.snapshot
        count = len(seen)
        assert count >= 3

        unsubscribe()
        controller.toggle_expand("/var")
        assert len(seen) == count

    @pytest.mark.asyncio
    async def test_failing_listener_is_isolated(self, controller):
        def broken(snapshot):
            raise RuntimeError("listener bug")

        controller.subscribe(broken)
        assert await controller.load_root() is True


class TestDownload:
    """Tests for download()."""

    @pytest.mark.asyncio
    async def test_success(self, controller, transfer, tmp_path):
        result = await controller.download("/var/log/app.log")

        assert result.ok is True
        expected = tmp_path.resolve() / "app.log"
        assert result.destination == expected
        assert str(expected) in result.message
        assert transfer.calls == [("ns/pod:app", "/var/log/app.log", str(expected))]

    @pytest.mark.asyncio
    async def test_failure(self, runner, settings):
        controller = TreeController("t", runner, FakeTransfer(error="tar not found"), settings=settings)
        result = await controller.download("/etc/passwd")

        assert result.ok is False
        assert result.destination is None
        assert "tar not found" in result.message

    @pytest.mark.asyncio
    async def test_does_not_touch_tree(self, controller):
        await controller.load_root()
        before = controller.snapshot
        await controller.download("/readme.txt")
        assert controller.snapshot is before

    @pytest.mark.asyncio
    async def test_custom_destination_dir(self, controller, tmp_path):
        out = tmp_path / "out"
        result = await controller.download("/etc/hosts", destination_dir=out)
        assert result.destination == out.resolve() / "hosts"


class TestDownloadName:
    """Tests for download_name()."""

    def test_last_segment(self):
        assert download_name("/etc/passwd") == "passwd"
        assert download_name("/my file.txt") == "my file.txt"

    def test_fallback(self):
        assert download_name("/") == "download"
        assert download_name("/etc/") == "download"
        assert download_name("", default="file") == "file"


class TestCollapseAndDismiss:
    """Tests for collapse() and dismiss_error()."""

    @pytest.mark.asyncio
    async def test_collapse_is_idempotent(self, controller):
        await controller.load_root()
        await controller.toggle_expand("/var")

        controller.collapse("/var")
        after = controller.snapshot
        controller.collapse("/var")
        assert controller.snapshot is after
        assert find_node(after, "/var").children is not None

    @pytest.mark.asyncio
    async def test_dismiss_error(self, controller, runner):
        runner.errors["/etc"] = "denied"
        await controller.load_root()
        await controller.toggle_expand("/etc")

        controller.dismiss_error("/etc")
        node = find_node(controller.snapshot, "/etc")
        assert node.last_error is None
        assert node.state == NodeState.UNLOADED


class TestUnexpectedErrors:
    """Non-transport failures from collaborators become state, not exceptions."""

    @pytest.mark.asyncio
    async def test_root_error_becomes_session_error(self, transfer, settings):
        runner = FakeRunner()

        async def broken(target, argv):
            raise RuntimeError("boom")

        runner.run = broken
        controller = TreeController("t", runner, transfer, settings=settings)

        assert await controller.load_root() is False
        assert "boom" in str(controller.session_error)
        assert controller.snapshot == ()
        assert controller.root_loading is False

    @pytest.mark.asyncio
    async def test_download_error_becomes_failed_result(self, runner, settings):
        transfer = FakeTransfer()

        async def broken(target, remote_path, local_destination):
            raise RuntimeError("disk gone")

        transfer.copy = broken
        controller = TreeController("t", runner, transfer, settings=settings)

        result = await controller.download("/etc/passwd")
        assert result.ok is False
        assert "disk gone" in result.message


class TestDownloadEdges:
    """Download timeout and destination handling."""

    @pytest.mark.asyncio
    async def test_copy_timeout(self, runner, tmp_path):
        class HangingTransfer:
            async def copy(self, target, remote_path, local_destination):
                await asyncio.sleep(10)

        settings = Settings(download_dir=tmp_path, copy_timeout=0.05)
        controller = TreeController("t", runner, HangingTransfer(), settings=settings)

        result = await controller.download("/var/big.tar")
        assert result.ok is False
        assert "timed out" in result.message
        assert result.destination is None

    @pytest.mark.asyncio
    async def test_relative_destination_is_made_absolute(self, controller, transfer, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = await controller.download("/etc/hosts", destination_dir=Path("out"))

        assert result.destination.is_absolute()
        assert result.destination == (tmp_path / "out").resolve() / "hosts"
        assert transfer.calls[-1][2] == str(result.destination)


class TestExpandAndLoad:
    @pytest.mark.asyncio
    async def test_loads_without_changing_expanded(self, controller):
        await controller.load_root()
        await controller.expand_and_load("/var")

        node = find_node(controller.snapshot, "/var")
        assert node.expanded is False
        assert node.state == NodeState.LOADED
