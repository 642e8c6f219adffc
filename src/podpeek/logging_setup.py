"""Console logging with Rich.

Created: 2026-10-18
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_installed = False


def setup_logging(level: str = "INFO") -> None:
    """Route all log records through a single RichHandler.

    Safe to call more than once; later calls only change the level.
    """
    global _installed
    root = logging.getLogger()
    root.setLevel(level.upper())

    if _installed:
        return

    handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    _installed = True

    # Keep HTTP server chatter down unless debugging.
    if root.level > logging.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
