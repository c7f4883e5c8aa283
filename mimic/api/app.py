"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mimic.api.dependencies import set_engine_manager
from mimic.api.engine_manager import EngineManager
from mimic.api.routes import api_router
from mimic.config import SimulationConfig
from mimic.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SimulationConfig | None = None, autostart: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = SimulationConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started, simulation %s.", "running" if autostart else "idle")
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Mimic Balance Engine",
        description=(
            "Variant-scaled mimic stats over a reloadable balance config.\n\n"
            "## API Groups\n\n"
            "- **State** — World summary, event feed, biome lookup\n"
            "- **Mimics** — List, inspect, spawn, re-variant, reveal/hide, kill with loot\n"
            "- **Control** — Simulation lifecycle: start, pause, resume, step, reset, speed, difficulty\n"
            "- **Config** — Balance document view/reload, variant table, scaling preview\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live world summary and events polled by clients."},
            {"name": "Mimics", "description": "Admin commands on individual mimics."},
            {"name": "Control", "description": "Simulation lifecycle controls."},
            {"name": "Config", "description": "Balance document and scaling diagnostics."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
