"""HTTP server for ``podpeek serve``.

Serves the ``/api/v1/`` routers only; any UI talks to it over REST.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app):
    yield
    from podpeek.explorer.sessions import get_session_manager

    await get_session_manager().close_all()


def create_api_app():
    """Build the FastAPI application."""
    from fastapi import FastAPI

    from podpeek.api.v1 import mount_v1_routers

    app = FastAPI(
        title="podpeek API",
        description="Browse and download files from running containers.",
        version="1.0.0",
        docs_url="/api/v1/docs",
        openapi_url="/api/v1/openapi.json",
        lifespan=_lifespan,
    )
    mount_v1_routers(app)
    return app


def run_server(host: str = "127.0.0.1", port: int = 8890) -> None:
    """Run the API with uvicorn (blocking)."""
    import uvicorn

    logger.info("Starting podpeek API on http://%s:%d", host, port)
    uvicorn.run(create_api_app(), host=host, port=port, log_config=None)
