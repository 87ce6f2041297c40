"""
FastAPI application entrypoint for the settings sync service.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from settings_sync.api.routes import router as api_router
from settings_sync.clients import close_redis_client
from settings_sync.core.config import get_settings
from settings_sync.core.errors import register_exception_handlers
from settings_sync.core.logging import configure_logging
from settings_sync.dependencies import get_redis_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Release the shared Redis pool on shutdown."""
    yield
    if get_redis_client.cache_info().currsize:
        await close_redis_client(get_redis_client())
        get_redis_client.cache_clear()
        logger.info("Redis client closed")


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Settings Sync API",
        version="0.1.0",
        description="Discord-authenticated storage for synchronized client settings.",
        lifespan=_lifespan,
    )
    register_exception_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["ETag"],
    )
    app.include_router(api_router)
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured address."""
    import uvicorn

    settings = get_settings()
    logger.info("Starting settings sync on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


__all__ = ["app", "create_app", "run"]
