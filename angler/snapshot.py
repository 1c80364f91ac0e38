"""Read-only state snapshots handed to the presentation layer.

A snapshot is built once per read and never aliases engine state, so a
renderer can hold on to it while the engine keeps ticking.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from angler.bite import BiteEvent
from angler.entities import Fish
from angler.line import LineState
from angler.timing_challenge import TimingChallenge


@dataclass(frozen=True)
class FishSnapshot:
    id: int
    species: str
    x: float
    y: float
    direction_x: int
    direction_y: int
    size: int
    value: int
    swim_angle: float

    @staticmethod
    def of(fish: Fish) -> "FishSnapshot":
        return FishSnapshot(
            id=fish.id,
            species=fish.species.value,
            x=fish.x,
            y=fish.y,
            direction_x=fish.direction_x,
            direction_y=fish.direction_y,
            size=fish.size,
            value=fish.value,
            swim_angle=fish.swim_angle,
        )


@dataclass(frozen=True)
class LineSnapshot:
    length: float
    mode: str
    reeling: bool
    hook_x: float
    hook_y: float

    @staticmethod
    def of(state: LineState, hook_x: float, hook_y: float) -> "LineSnapshot":
        return LineSnapshot(
            length=state.length,
            mode=state.mode.value,
            reeling=state.reeling,
            hook_x=hook_x,
            hook_y=hook_y,
        )


@dataclass(frozen=True)
class BiteSnapshot:
    fish: FishSnapshot
    intensity: float
    started_at_ms: float

    @staticmethod
    def of(bite: Optional[BiteEvent]) -> Optional["BiteSnapshot"]:
        if bite is None or not bite.active:
            return None
        return BiteSnapshot(FishSnapshot.of(bite.fish), bite.intensity, bite.started_at_ms)


@dataclass(frozen=True)
class ChallengeSnapshot:
    state: str
    fish: FishSnapshot
    progress: float
    window_start: float
    window_end: float
    success: bool

    @staticmethod
    def of(challenge: TimingChallenge) -> Optional["ChallengeSnapshot"]:
        if not challenge.is_present or challenge.fish is None:
            return None
        return ChallengeSnapshot(
            state=challenge.state.value,
            fish=FishSnapshot.of(challenge.fish),
            progress=challenge.progress,
            window_start=challenge.window.start,
            window_end=challenge.window.end,
            success=challenge.success,
        )


@dataclass(frozen=True)
class SessionSnapshot:
    money: int
    timer: int
    is_playing: bool
    fish_caught: int
    game_over: bool
    generation: int


@dataclass(frozen=True)
class GameSnapshot:
    """Everything a renderer needs for one frame."""

    frame: int
    time_ms: float
    boat_x: float
    fish: List[FishSnapshot]
    line: LineSnapshot
    bite: Optional[BiteSnapshot]
    challenge: Optional[ChallengeSnapshot]
    session: SessionSnapshot
    last_caught: Optional[FishSnapshot]
    stats: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
