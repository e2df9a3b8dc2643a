"""FastAPI application factory for the workspace service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .route import router
from .service import ApiSettings, build_synchronizer
from ..mcpserver import mcp

logger = logging.getLogger("reviver")


def create_app(settings: ApiSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or ApiSettings.from_env()

    # setup mcp
    mcp_app = mcp.http_app("/")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        synchronizer = build_synchronizer(settings)
        app.state.synchronizer = synchronizer
        await synchronizer.start()
        try:
            async with mcp_app.lifespan(app):
                yield
        finally:
            synchronizer.close()
            await synchronizer.flush()
            logger.info("Workspace synchronizer stopped")

    app = FastAPI(
        title="Project Reviver API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.include_router(router)

    # mount mcp
    app.mount("/mcp", mcp_app)

    return app


app = create_app()


__all__ = ["app", "create_app"]
