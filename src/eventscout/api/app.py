"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventscout import __version__
from eventscout.api.deps import set_engine
from eventscout.api.v1.router import router as v1_router
from eventscout.config.settings import Settings
from eventscout.core.engine import EventSearchEngine
from eventscout.observability.logging import setup_logging

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = Path("eventscout-config.yaml")
_CONFIG_ENV_VAR = "EVENTSCOUT_CONFIG_FILE"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads the YAML file named by
            ``EVENTSCOUT_CONFIG_FILE`` or ``eventscout-config.yaml`` from the
            working directory when present, else the environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        config_path = Path(os.environ.get(_CONFIG_ENV_VAR) or _DEFAULT_CONFIG)
        if config_path.exists():
            settings = Settings.from_yaml(config_path)
        else:
            settings = Settings()

    setup_logging(settings.observability)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting EventScout v%s", __version__)

        engine = EventSearchEngine(settings)
        await engine.initialize()
        set_engine(engine)

        app.state.settings = settings
        app.state.engine = engine

        logger.info("EventScout is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down EventScout...")
        await engine.shutdown()
        set_engine(None)
        logger.info("EventScout shutdown complete")

    app = FastAPI(
        title="EventScout",
        description=(
            "Federated event search — one page of results blended from the local "
            "event store and an external discovery provider."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    return app
