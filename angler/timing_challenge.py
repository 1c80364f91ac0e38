"""Timing-based catch minigame.

Once a bite hands off, a progress value sweeps 0 -> 100 at a fixed rate per
frame and wraps back to 0 (it never bounces or stops). The player gets one
attempt: it succeeds iff progress lies inside the target window at that
instant.

Target window policy
--------------------
The window bounds are drawn independently (``start = 50 + U(0,20)``,
``end = 70 + U(0,20)``), so ``end`` can land below ``start``. The pair is
sorted, and if the result is narrower than ``window_min_width`` the end is
pushed out (or, against the top, the start pulled in) until it is not. The
drawn window therefore always satisfies ``0 <= start < end <= progress_max``
and no draw is ever repeated.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from angler.config import ChallengeConfig
from angler.entities import Fish
from angler.result import Err, Result
from angler.state_machine import ChallengeState, create_challenge_state_machine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetWindow:
    start: float
    end: float

    @property
    def width(self) -> float:
        return self.end - self.start

    def contains(self, progress: float) -> bool:
        """Inclusive on both ends."""
        return self.start <= progress <= self.end


def normalize_window(start: float, end: float, config: ChallengeConfig) -> TargetWindow:
    """Apply the inversion policy to a raw (start, end) draw."""
    low, high = (start, end) if start <= end else (end, start)
    if high - low < config.window_min_width:
        high = low + config.window_min_width
        if high > config.progress_max:
            high = config.progress_max
            low = high - config.window_min_width
    return TargetWindow(start=max(0.0, low), end=min(config.progress_max, high))


def draw_window(rng: random.Random, config: ChallengeConfig) -> TargetWindow:
    """Draw a target window: start first, then end, one uniform draw each."""
    start = config.window_start_base + rng.random() * config.window_start_spread
    end = config.window_end_base + rng.random() * config.window_end_spread
    window = normalize_window(start, end, config)
    if (window.start, window.end) != (start, end):
        logger.debug(
            "Target window [%.2f, %.2f] normalised to [%.2f, %.2f]",
            start,
            end,
            window.start,
            window.end,
        )
    return window


class ChallengeOutcome(str, Enum):
    CAUGHT = "caught"
    MISSED = "missed"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ChallengeResult:
    outcome: ChallengeOutcome
    fish: Fish
    progress: float

    @property
    def success(self) -> bool:
        return self.outcome is ChallengeOutcome.CAUGHT


class TimingChallenge:
    """The single catch minigame slot.

    States: INACTIVE -> ACTIVE -> (RESOLVED on success) -> INACTIVE.
    A failed attempt or a cancellation returns straight to INACTIVE.
    """

    def __init__(
        self,
        config: ChallengeConfig,
        rng: random.Random,
        track_history: bool = False,
    ) -> None:
        self.config = config
        self.rng = rng
        self._machine = create_challenge_state_machine(track_history=track_history)
        self.fish: Optional[Fish] = None
        self.progress: float = 0.0
        self.window: Optional[TargetWindow] = None
        self.success: bool = False
        self.started_at_ms: Optional[float] = None

    @property
    def state(self) -> ChallengeState:
        return self._machine.state

    @property
    def is_active(self) -> bool:
        """Accepting an attempt."""
        return self.state is ChallengeState.ACTIVE

    @property
    def is_present(self) -> bool:
        """Active or still showing a success; line and boat stay locked."""
        return self.state is not ChallengeState.INACTIVE

    def activate(self, fish: Fish, at_ms: float = 0.0) -> Result[ChallengeState, str]:
        """Open a challenge for *fish* (a detached copy) with a fresh window."""
        result = self._machine.try_transition(ChallengeState.ACTIVE, at_ms, f"fish {fish.id}")
        if result.is_err():
            return result
        self.fish = fish
        self.progress = 0.0
        self.window = draw_window(self.rng, self.config)
        self.success = False
        self.started_at_ms = at_ms
        return result

    def advance(self) -> float:
        """Step progress by one frame, wrapping to 0 on reaching the max."""
        if self.is_active:
            progress = self.progress + self.config.progress_step
            self.progress = 0.0 if progress >= self.config.progress_max else progress
        return self.progress

    def attempt(self, at_ms: float = 0.0) -> Optional[ChallengeResult]:
        """Resolve the challenge on a player attempt.

        Returns:
            The result, or None when no challenge is accepting attempts
        """
        if not self.is_active:
            return None
        fish = self.fish
        progress = self.progress
        if self.window.contains(progress):
            self._machine.transition(ChallengeState.RESOLVED, at_ms, "caught")
            self.success = True
            return ChallengeResult(ChallengeOutcome.CAUGHT, fish, progress)
        self._machine.transition(ChallengeState.INACTIVE, at_ms, "missed")
        self._clear()
        return ChallengeResult(ChallengeOutcome.MISSED, fish, progress)

    def finish(self, at_ms: float = 0.0) -> Result[ChallengeState, str]:
        """Clear a resolved (successful) challenge after its display time."""
        if self.state is not ChallengeState.RESOLVED:
            return Err(f"Nothing to finish in state {self.state.name}")
        result = self._machine.try_transition(ChallengeState.INACTIVE, at_ms, "display cleared")
        self._clear()
        return result

    def cancel(
        self,
        at_ms: float = 0.0,
        outcome: ChallengeOutcome = ChallengeOutcome.CANCELLED,
    ) -> Optional[ChallengeResult]:
        """Abort an active challenge; the fish is lost.

        A resolved challenge is simply cleared (its fish was already caught).

        Returns:
            The loss result for an active challenge, otherwise None
        """
        if self.state is ChallengeState.RESOLVED:
            self.finish(at_ms)
            return None
        if not self.is_active:
            return None
        result = ChallengeResult(outcome, self.fish, self.progress)
        self._machine.transition(ChallengeState.INACTIVE, at_ms, outcome.value)
        self._clear()
        return result

    def reset(self, at_ms: float = 0.0) -> None:
        self._machine.reset(at_ms, "challenge reset")
        self._clear()

    def _clear(self) -> None:
        self.fish = None
        self.progress = 0.0
        self.window = None
        self.success = False
        self.started_at_ms = None
