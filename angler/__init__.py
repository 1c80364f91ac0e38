"""Headless arcade fishing simulation.

This package contains the pure game logic, with no UI dependencies. Key
modules include:

- engine: ``FishingEngine``, the single owner of game state
- population: Fish spawning and swimming
- line: Cast / stop / reel-in actuator
- bite: Which fish strikes the hook
- timing_challenge: The catch minigame
- session: Money, countdown and catch counter
- scheduler / clock: Simulation-time cadences and deferred actions

Design note: this module exposes a small, explicit public API via ``__all__``.
Use direct imports from submodules for internal helpers.
"""

from angler.config import GameConfig
from angler.engine import Direction, FishingEngine
from angler.exceptions import AnglerError, ConfigurationError, InvalidTransitionError
from angler.snapshot import GameSnapshot
from angler.species import Species

__all__ = [
    "AnglerError",
    "ConfigurationError",
    "Direction",
    "FishingEngine",
    "GameConfig",
    "GameSnapshot",
    "InvalidTransitionError",
    "Species",
]
