"""Application factory and context for the fishing game API.

The FastAPI app is built by ``create_app`` instead of at import time, and all
runtime state lives on an ``AppContext`` attached to ``app.state.context``.
Tests build their own context (usually with a seeded engine) and never share
a runner.

Usage:
------
    # Production (settings from environment)
    app = create_app()

    # Testing
    app = create_app(context=AppContext(runner=GameRunner(seed=42)), start_loop=False)
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import orjson
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from angler.config import GameConfig
from angler.config.server import DEFAULT_API_PORT
from angler.exceptions import ConfigurationError
from backend.broadcast import start_broadcast, stop_broadcast
from backend.game_runner import GameRunner
from backend.logging_config import configure_logging


def _seed_from_env() -> Optional[int]:
    raw = os.getenv("ANGLER_SEED")
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"ANGLER_SEED must be an integer, got {raw!r}") from e


def load_game_config(path: Optional[str] = None) -> GameConfig:
    """Load a GameConfig from a JSON file (``ANGLER_CONFIG`` when *path* is None).

    Returns the default configuration when no file is configured.
    """
    path = path if path is not None else os.getenv("ANGLER_CONFIG")
    if not path:
        return GameConfig()
    try:
        data = orjson.loads(Path(path).read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read game config {path}: {e}") from e
    return GameConfig.from_dict(data)


@dataclass
class AppContext:
    """Runtime context holding all application state."""

    runner: Optional[GameRunner] = None

    api_port: int = field(
        default_factory=lambda: int(os.getenv("ANGLER_API_PORT", str(DEFAULT_API_PORT)))
    )
    production_mode: bool = field(
        default_factory=lambda: os.getenv("PRODUCTION", "false").lower() == "true"
    )
    allowed_origins: List[str] = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(",")
    )

    server_start_time: float = field(default_factory=time.time)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("angler.backend"))

    def ensure_runner(self) -> GameRunner:
        if self.runner is None:
            self.runner = GameRunner(config=load_game_config(), seed=_seed_from_env())
        return self.runner


def create_app(
    *,
    production_mode: Optional[bool] = None,
    context: Optional[AppContext] = None,
    start_loop: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        production_mode: Override production mode (default: from PRODUCTION env var)
        context: Pre-configured AppContext (for testing). If None, creates a new one.
        start_loop: Run the real-time game loop and broadcaster during the
            app lifespan. Tests pass False and step the runner by hand.

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    logger = configure_logging(extra_loggers=("backend",))

    if context is None:
        context = AppContext()
    if production_mode is not None:
        context.production_mode = production_mode
    context.logger = logger

    runner = context.ensure_runner()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = app.state.context
        if start_loop:
            runner.start()
            start_broadcast(runner)
        ctx.logger.info("LIFESPAN: Startup complete (game %s)", runner.game_id[:8])
        try:
            yield
        finally:
            ctx.logger.info("LIFESPAN: Shutting down")
            if start_loop:
                await stop_broadcast(runner)
                runner.stop()

    app = FastAPI(
        title="Angler Arcade API",
        lifespan=lifespan,
        docs_url=None if context.production_mode else "/docs",
        redoc_url=None if context.production_mode else "/redoc",
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins if context.production_mode else ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    _setup_routers(app, context)
    return app


def _setup_routers(app: FastAPI, ctx: AppContext) -> None:
    """Setup and include all API routers."""
    from backend.routers import game, websocket

    app.include_router(game.setup_router(ctx.runner, ctx.server_start_time))
    app.include_router(websocket.setup_router(ctx.runner))
    ctx.logger.info("API routers configured")
