"""Configuration package for the fishing engine.

Constant modules (display, fishing, session, server) hold the reference
balancing; ``game_config`` wraps them in dataclasses the engine consumes.
"""

from angler.config.game_config import (
    ArenaConfig,
    BiteConfig,
    ChallengeConfig,
    GameConfig,
    LineConfig,
    PopulationConfig,
    SessionConfig,
)

__all__ = [
    "ArenaConfig",
    "BiteConfig",
    "ChallengeConfig",
    "GameConfig",
    "LineConfig",
    "PopulationConfig",
    "SessionConfig",
]
