"""Domain event definitions for the fishing engine.

Events are data-only (frozen dataclasses) and carry all context a handler
needs. ``at_ms`` is simulation time since the engine was created and
``generation`` identifies the session that produced the event.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GameStartedEvent:
    """A session started (or restarted).

    Attributes:
        generation: Session generation number
        money: Starting stake
        timer: Countdown budget in seconds
        population: Number of fish spawned
        at_ms: Simulation time
    """

    generation: int
    money: int
    timer: int
    population: int
    at_ms: float


@dataclass(frozen=True)
class CastStartedEvent:
    """The line started extending from the boat."""

    generation: int
    boat_x: float
    at_ms: float


@dataclass(frozen=True)
class CastResolvedEvent:
    """The player stopped the line and the bite query ran.

    Attributes:
        hook_x: Hook horizontal position (boat x)
        hook_y: Hook depth (water surface + line length)
        candidates: Number of fish inside the bite radius
        struck_fish_id: Fish that bit, or None for an empty cast
    """

    generation: int
    hook_x: float
    hook_y: float
    candidates: int
    struck_fish_id: Optional[int]
    at_ms: float


@dataclass(frozen=True)
class FishHookedEvent:
    """A fish struck and was removed from the live population."""

    generation: int
    fish_id: int
    species: str
    value: int
    at_ms: float


@dataclass(frozen=True)
class ChallengeStartedEvent:
    """The bite handed off to a timing challenge."""

    generation: int
    fish_id: int
    window_start: float
    window_end: float
    at_ms: float


@dataclass(frozen=True)
class FishCaughtEvent:
    """A timing challenge succeeded and the fish's value was credited.

    Attributes:
        progress: Progress value at the instant of the attempt
        money: Session money after crediting
        fish_caught: Catch counter after incrementing
    """

    generation: int
    fish_id: int
    species: str
    value: int
    progress: float
    money: int
    fish_caught: int
    at_ms: float


@dataclass(frozen=True)
class FishLostEvent:
    """A hooked fish got away.

    Attributes:
        reason: "missed" (attempt outside window), "timeout" or "cancelled"
        progress: Progress at resolution (None when lost before the challenge)
    """

    generation: int
    fish_id: int
    species: str
    reason: str
    progress: Optional[float]
    at_ms: float


@dataclass(frozen=True)
class GameOverEvent:
    """The countdown reached zero; money and catch count are the final score."""

    generation: int
    money: int
    fish_caught: int
    at_ms: float
