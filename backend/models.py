"""Data models for the HTTP and WebSocket API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CommandRequest(BaseModel):
    """A player intent sent by a client.

    ``command`` is one of ``start_game``, ``move_player``, ``toggle_line``
    or ``attempt_catch``. ``move_player`` takes ``{"direction": "left"|"right"}``.
    """

    command: str
    data: Dict[str, Any] = Field(default_factory=dict)


class CommandResponse(BaseModel):
    """Outcome of a command."""

    success: bool
    command: str
    accepted: bool = False
    error: Optional[str] = None
    outcome: Optional[str] = None  # attempt_catch: caught / missed
    money: Optional[int] = None


class HealthInfo(BaseModel):
    """Liveness information for the game server."""

    status: str = "ok"
    version: str
    uptime_seconds: float
    running: bool
    is_playing: bool
    generation: int
    connected_clients: int


class SpeciesInfo(BaseModel):
    species: str
    value: int
    size: int
    base_speed_x: float
    base_speed_y: float
    bite_probability: float
    spawn_weight: float


class GameConfigInfo(BaseModel):
    """Active balancing values plus the species table."""

    config: Dict[str, Dict[str, Any]]
    species: List[SpeciesInfo]
    seed: Optional[int] = None
