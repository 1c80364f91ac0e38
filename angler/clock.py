"""Simulation clock driving the three periodic cadences.

The engine runs three logically independent periodic ticks:

- FRAME: fish motion, bite feedback, challenge progress (frame rate)
- LINE: line length (every 50 ms)
- COUNTDOWN: session timer (every second)

``TickClock`` turns elapsed real time into an ordered stream of these ticks.
Due times are computed as ``origin + n * interval`` so long runs do not
accumulate float drift. Ticks due at the same instant come out in
``TickKind`` order.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional


class TickKind(IntEnum):
    """Cadences, in tie-break order."""

    COUNTDOWN = 0
    LINE = 1
    FRAME = 2


@dataclass(frozen=True)
class Tick:
    kind: TickKind
    at_ms: float


class _Cadence:
    def __init__(self, interval_ms: float, origin_ms: float) -> None:
        self.interval_ms = interval_ms
        self.origin_ms = origin_ms
        self.count = 0

    @property
    def next_due(self) -> float:
        return self.origin_ms + (self.count + 1) * self.interval_ms


class TickClock:
    """Ordered periodic ticks over simulation time (milliseconds)."""

    def __init__(
        self,
        frame_ms: float,
        line_ms: float,
        countdown_ms: float,
        now_ms: float = 0.0,
    ) -> None:
        self._intervals = {
            TickKind.COUNTDOWN: countdown_ms,
            TickKind.LINE: line_ms,
            TickKind.FRAME: frame_ms,
        }
        self._cadences: Dict[TickKind, _Cadence] = {}
        self.now_ms = now_ms
        self.restart(now_ms)

    def restart(self, now_ms: Optional[float] = None) -> None:
        """Re-anchor every cadence so its first tick is one interval from now."""
        if now_ms is not None:
            self.now_ms = now_ms
        self._cadences = {
            kind: _Cadence(interval, self.now_ms) for kind, interval in self._intervals.items()
        }

    def frames_elapsed(self) -> int:
        return self._cadences[TickKind.FRAME].count

    def peek(self) -> Tick:
        """Earliest pending tick (ties broken by TickKind)."""
        kind = min(self._cadences, key=lambda k: (self._cadences[k].next_due, k))
        return Tick(kind, self._cadences[kind].next_due)

    def consume(self, kind: TickKind) -> Tick:
        """Mark the next *kind* tick as processed and move the clock to it."""
        cadence = self._cadences[kind]
        at_ms = cadence.next_due
        cadence.count += 1
        self.now_ms = max(self.now_ms, at_ms)
        return Tick(kind, at_ms)
