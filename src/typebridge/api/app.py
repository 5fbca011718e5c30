"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from typebridge import __version__
from typebridge.api.v1.router import router as v1_router
from typebridge.client.registry import ServerRegistry
from typebridge.config.settings import Settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, registry: ServerRegistry | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        registry: Pre-built server registry. If None, one is built from
            ``settings.servers`` and connected at startup.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        yaml_path = Path("typebridge.yaml")
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    owns_registry = registry is None
    if registry is None:
        registry = ServerRegistry(settings.servers)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting typebridge v%s", __version__)
        if owns_registry:
            registry.connect_all()
        logger.info("typebridge is ready (servers: %s)", ", ".join(registry.available_servers) or "none")
        yield

        logger.info("Shutting down typebridge...")
        if owns_registry:
            registry.close_all()

    app = FastAPI(
        title="typebridge",
        description="Typesense monitoring and API key administration.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    return app
