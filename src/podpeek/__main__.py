"""podpeek entry point.

Commands:
  podpeek tree -n NS POD -c CONTAINER [PATH ...]   Print the tree, expanding PATHs
  podpeek get  -n NS POD -c CONTAINER REMOTE_PATH  Download one file
  podpeek serve [--host HOST] [--port PORT]        Run the HTTP API
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console

from podpeek.config import get_settings
from podpeek.explorer.controller import TreeController
from podpeek.explorer.models import ROOT_PATH, find_node
from podpeek.kube import KubectlRunner, KubectlTransfer, PodTarget
from podpeek.logging_setup import setup_logging
from podpeek.render import render_tree

logger = logging.getLogger(__name__)


def _ancestors(path: str) -> list[str]:
    """``/a/b/c`` -> ``["/a", "/a/b", "/a/b/c"]``."""
    parts = [p for p in path.split("/") if p]
    return ["/" + "/".join(parts[: i + 1]) for i in range(len(parts))]


def _build_controller(args: argparse.Namespace) -> TreeController:
    settings = get_settings()
    target = PodTarget(namespace=args.namespace, pod=args.pod, container=args.container)
    return TreeController(
        target,
        KubectlRunner.from_settings(settings),
        KubectlTransfer.from_settings(settings),
        settings=settings,
    )


async def expand_to(controller: TreeController, path: str) -> bool:
    """Open every directory on the way to *path*. Returns False if one is missing."""
    for step in _ancestors(path):
        node = find_node(controller.snapshot, step)
        if node is None or not node.is_dir:
            logger.warning("No such directory: %s", step)
            return False
        if not node.expanded:
            task = controller.toggle_expand(step)
            if task is not None:
                await task
        node = find_node(controller.snapshot, step)
        if node is not None and node.last_error:
            logger.warning("Could not list %s: %s", step, node.last_error)
            return False
    return True


async def _tree(args: argparse.Namespace) -> int:
    controller = _build_controller(args)
    if not await controller.load_root():
        Console(stderr=True).print(f"[red]Error:[/red] {controller.session_error}")
        return 1

    ok = True
    for path in args.paths:
        ok = await expand_to(controller, path) and ok

    Console().print(render_tree(controller.snapshot, title=f"{controller.target} {ROOT_PATH}"))
    return 0 if ok else 1


async def _get(args: argparse.Namespace) -> int:
    controller = _build_controller(args)
    result = await controller.download(args.remote_path, destination_dir=args.output_dir)
    console = Console(stderr=not result.ok)
    console.print(result.message)
    return 0 if result.ok else 1


def _add_target_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-n", "--namespace", default="default", help="Pod namespace")
    parser.add_argument("pod", help="Pod name")
    parser.add_argument("-c", "--container", required=True, help="Container name")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podpeek",
        description="Browse and download files from a running container",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: from settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    tree = sub.add_parser("tree", help="Print the directory tree")
    _add_target_args(tree)
    tree.add_argument("paths", nargs="*", help="Directories to expand")

    get = sub.add_parser("get", help="Download a file")
    _add_target_args(get)
    get.add_argument("remote_path", help="Absolute path inside the container")
    get.add_argument("-o", "--output-dir", type=Path, default=None, help="Local directory")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", "-p", type=int, default=8890)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level or get_settings().log_level)

    if args.command == "serve":
        from podpeek.api.serve import run_server

        run_server(host=args.host, port=args.port)
        return 0
    if args.command == "tree":
        return asyncio.run(_tree(args))
    return asyncio.run(_get(args))


if __name__ == "__main__":
    sys.exit(main())
