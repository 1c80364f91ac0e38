"""Session economy: money, countdown and catch counter."""

import logging
from typing import Optional

from angler.config import SessionConfig
from angler.state_machine import SessionState, create_session_state_machine

logger = logging.getLogger(__name__)


class Session:
    """The one running game's economy fields.

    ``start()`` fully resets money, timer and catch count. When the countdown
    reaches zero the session stops but keeps money and catch count as the
    final score.
    """

    def __init__(self, config: SessionConfig) -> None:
        self.config = config
        self._machine = create_session_state_machine()
        self.money: int = config.starting_money
        self.timer: int = config.time_budget_seconds
        self.fish_caught: int = 0
        self.generation: int = 0

    @property
    def state(self) -> SessionState:
        return self._machine.state

    @property
    def is_playing(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def is_over(self) -> bool:
        """Stopped after a played game (timer ran out)."""
        return not self.is_playing and self.generation > 0 and self.timer <= 0

    @property
    def history(self):
        return self._machine.history

    def start(self, generation: int, at_ms: float = 0.0) -> None:
        self.money = self.config.starting_money
        self.timer = self.config.time_budget_seconds
        self.fish_caught = 0
        self.generation = generation
        self._machine.transition(SessionState.RUNNING, at_ms, f"start #{generation}")
        logger.info(
            "Session %d started: money=%d timer=%ds",
            generation,
            self.money,
            self.timer,
        )

    def countdown(self, at_ms: float = 0.0) -> bool:
        """Take one second off the clock.

        Returns:
            True if this tick ended the game
        """
        if not self.is_playing:
            return False
        self.timer = max(0, self.timer - 1)
        if self.timer == 0:
            self.stop(at_ms, reason="time up")
            return True
        return False

    def credit(self, value: int) -> int:
        """Add a caught fish's value; returns the new balance."""
        self.money += value
        self.fish_caught += 1
        return self.money

    def stop(self, at_ms: float = 0.0, reason: Optional[str] = None) -> None:
        if not self.is_playing:
            return
        self._machine.transition(SessionState.STOPPED, at_ms, reason or "stopped")
        logger.info(
            "Session %d over (%s): money=%d fish_caught=%d",
            self.generation,
            reason or "stopped",
            self.money,
            self.fish_caught,
        )
