"""Fishing line actuator.

The line cycles ``idle -> extending -> retracting -> idle``. Extension is
stopped only by a second player press (it holds at ``max_length`` rather than
auto-stopping). After the stop press the line is in RETRACTING but slack:
it does not reel in until ``begin_reel()`` is called, which the engine
schedules a short delay later.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from angler.config import LineConfig
from angler.result import Ok, Result
from angler.state_machine import LineMode, create_line_state_machine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineState:
    """Read-only view of the line.

    Attributes:
        length: Current length, 0..max_length
        mode: idle, extending or retracting
        reeling: True once a retracting line is actually being pulled in
    """

    length: float
    mode: LineMode
    reeling: bool = False

    @property
    def is_idle(self) -> bool:
        return self.mode is LineMode.IDLE


class LineController:
    """Single fishing line; one cast at a time."""

    def __init__(self, config: LineConfig, track_history: bool = False) -> None:
        self.config = config
        self._machine = create_line_state_machine(track_history=track_history)
        self._length = 0.0
        self._reeling = False

    @property
    def mode(self) -> LineMode:
        return self._machine.state

    @property
    def length(self) -> float:
        return self._length

    @property
    def reeling(self) -> bool:
        return self._reeling

    @property
    def state(self) -> LineState:
        return LineState(length=self._length, mode=self.mode, reeling=self._reeling)

    @property
    def history(self):
        return self._machine.history

    def hook_position(self, boat_x: float) -> Tuple[float, float]:
        """Hook tip: below the boat, ``water_surface_y + length`` deep."""
        return boat_x, self.config.water_surface_y + self._length

    def start_cast(self, at_ms: float = 0.0) -> Result[LineMode, str]:
        """idle -> extending. Refused unless the line is idle."""
        return self._machine.try_transition(LineMode.EXTENDING, at_ms, "cast")

    def stop_cast(self, at_ms: float = 0.0) -> Result[LineMode, str]:
        """extending -> retracting (slack until ``begin_reel``).

        A line stopped before it has paid out anything has nothing to reel
        in, so it passes straight through to idle.
        """
        result = self._machine.try_transition(LineMode.RETRACTING, at_ms, "stop")
        if result.is_err():
            return result
        self._reeling = False
        if self._length <= 0:
            self._machine.transition(LineMode.IDLE, at_ms, "stopped before paying out")
            return Ok(LineMode.IDLE)
        return result

    def begin_reel(self) -> bool:
        """Start pulling a retracting line in. Returns False if not retracting."""
        if self.mode is not LineMode.RETRACTING:
            return False
        self._reeling = True
        return True

    def tick(self, at_ms: float = 0.0) -> LineMode:
        """Advance length by one line step.

        Extending grows the line up to the cap. A reeling line shrinks; when it
        reaches 0 it is floored there and the line goes idle in the same tick.
        """
        mode = self.mode
        if mode is LineMode.EXTENDING:
            self._length = min(self.config.max_length, self._length + self.config.extend_step)
        elif mode is LineMode.RETRACTING and self._reeling:
            self._length = max(0.0, self._length - self.config.retract_step)
            if self._length <= 0:
                self._machine.transition(LineMode.IDLE, at_ms, "reeled in")
                self._reeling = False
                logger.debug("Line reeled in")
        return self.mode

    def reset(self, at_ms: float = 0.0) -> None:
        self._machine.reset(at_ms, "line reset")
        self._length = 0.0
        self._reeling = False
