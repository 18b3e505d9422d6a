"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dungeon_run.api.dependencies import set_run_manager
from dungeon_run.api.run_manager import RunManager
from dungeon_run.api.routes import api_router
from dungeon_run.config import RunConfig
from dungeon_run.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: RunConfig | None = None, auto_start: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    With ``auto_start=False`` the run is planned and its first room loaded,
    but no ticks happen until ``/control/start`` or ``/control/step``.
    """
    if config is None:
        config = RunConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = RunManager(_config)
        set_run_manager(manager)
        if auto_start:
            manager.start()
            logger.info("API server started — run in progress.")
        else:
            logger.info("API server started — run waiting for /control/start.")
        yield
        manager.stop()
        set_run_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Dungeon Run Orchestrator",
        description=(
            "Seeded room-by-room dungeon run: plan, spawn, clear, advance.\n\n"
            "## API Groups\n\n"
            "- **State** — Live run state: phase, current room, gate, enemies, events\n"
            "- **Plan** — The seed-derived room sequence (fixed for the whole run)\n"
            "- **Control** — Run lifecycle: start, pause, resume, step, reset\n"
            "- **Config** — Read-only run configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live run state polled by a viewer: phase, room, gate, alive enemies, recent events."},
            {"name": "Plan", "description": "The ordered blueprint choices for this run. Fetch once per run; it never changes mid-run."},
            {"name": "Control", "description": "Run lifecycle controls: start, pause, resume, single-step, reset and speed."},
            {"name": "Config", "description": "Read-only run configuration (seed, room counts, timing, repair defaults)."},
        ],
    )

    # CORS — allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
