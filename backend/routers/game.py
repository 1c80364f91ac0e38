"""HTTP endpoints for the fishing game."""

import logging
import time
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from angler.species import SPECIES_TABLE
from backend import __version__
from backend.game_runner import GameRunner
from backend.models import CommandRequest, GameConfigInfo, HealthInfo, SpeciesInfo

logger = logging.getLogger(__name__)


def setup_router(runner: GameRunner, server_start_time: Optional[float] = None) -> APIRouter:
    """Create the game router bound to *runner*.

    Endpoints:
        GET  /health
        GET  /api/state
        GET  /api/config
        POST /api/game/start
        POST /api/game/command
    """
    router = APIRouter()
    started = server_start_time if server_start_time is not None else time.time()

    @router.get("/health", response_model=HealthInfo)
    async def health() -> HealthInfo:
        status = runner.get_status()
        return HealthInfo(
            version=__version__,
            uptime_seconds=time.time() - started,
            running=status["running"],
            is_playing=status["is_playing"],
            generation=status["generation"],
            connected_clients=status["clients"],
        )

    @router.get("/api/state")
    async def get_state() -> Response:
        """Current snapshot, serialized the same way as WebSocket frames."""
        state = await runner.get_state_async()
        return Response(content=runner.serialize_state(state), media_type="application/json")

    @router.get("/api/config", response_model=GameConfigInfo)
    async def get_config() -> GameConfigInfo:
        species = [
            SpeciesInfo(species=s.value, **asdict(p)) for s, p in SPECIES_TABLE.items()
        ]
        return GameConfigInfo(
            config=runner.engine.config.to_dict(),
            species=species,
            seed=runner.seed,
        )

    @router.post("/api/game/start")
    async def start_game():
        response = await runner.handle_command_async("start_game")
        return JSONResponse(response)

    @router.post("/api/game/command")
    async def send_command(request: CommandRequest):
        response = await runner.handle_command_async(request.command, request.data)
        status_code = 200 if response.get("success") else 400
        return JSONResponse(response, status_code=status_code)

    return router
