# tokenpulse/api/app.py
"""FastAPI application for tokenpulse."""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tokenpulse.api.dependencies import get_tokenpulse_version
from tokenpulse.api.routes import health_router, realtime_router, versions_router
from tokenpulse.config import TokenPulseConfig, load_config, resolve_config_path
from tokenpulse.logging import REALTIME, configure_logging, get_logger
from tokenpulse.realtime.registry import ConnectionRegistry

logger = get_logger(__name__)


async def _heartbeat(registry: ConnectionRegistry, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        registry.broadcast({"type": "heartbeat", "timestamp": int(time.time() * 1000)})


def create_app(
    config: TokenPulseConfig | None = None,
    registry: ConnectionRegistry | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration; loaded from $TOKENPULSE_CONFIG / defaults if None
        registry: Connection registry; one is created from config if None

    Returns:
        Configured FastAPI app instance.
    """
    if config is None:
        config = load_config(resolve_config_path())
    if registry is None:
        registry = ConnectionRegistry(max_connections=config.realtime.max_connections)

    configure_logging(config.logging.level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        task = asyncio.create_task(_heartbeat(registry, config.realtime.heartbeat_interval))
        try:
            yield
        finally:
            task.cancel()
            closed = registry.close_all()
            logger.info(f"{REALTIME} shutdown closed {closed} connection(s)")

    app = FastAPI(
        title="tokenpulse API",
        description=(
            "Progressive scan result delivery and design token version comparison."
        ),
        version=get_tokenpulse_version(),
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.registry = registry

    # Add CORS middleware for browser clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(versions_router)
    app.include_router(realtime_router)

    return app
