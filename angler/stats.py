"""Per-session statistics collected from domain events."""

import logging
from collections import Counter
from typing import Any, Dict

from angler.events import (
    CastResolvedEvent,
    CastStartedEvent,
    EventBus,
    FishCaughtEvent,
    FishHookedEvent,
    FishLostEvent,
    GameStartedEvent,
)

logger = logging.getLogger(__name__)


class SessionStats:
    """Counts what happened in the current session.

    Subscribes itself to the bus; a ``GameStartedEvent`` wipes the counters.
    """

    def __init__(self, bus: EventBus) -> None:
        self.casts = 0
        self.empty_casts = 0
        self.bites = 0
        self.catches = 0
        self.losses: Counter = Counter()
        self.caught_by_species: Counter = Counter()
        self.earned_by_species: Counter = Counter()

        bus.subscribe(GameStartedEvent, self._on_started)
        bus.subscribe(CastStartedEvent, self._on_cast)
        bus.subscribe(CastResolvedEvent, self._on_resolved)
        bus.subscribe(FishHookedEvent, self._on_hooked)
        bus.subscribe(FishCaughtEvent, self._on_caught)
        bus.subscribe(FishLostEvent, self._on_lost)

    def reset(self) -> None:
        self.casts = 0
        self.empty_casts = 0
        self.bites = 0
        self.catches = 0
        self.losses.clear()
        self.caught_by_species.clear()
        self.earned_by_species.clear()

    @property
    def catch_rate(self) -> float:
        """Catches per bite (0.0 before the first bite)."""
        return self.catches / self.bites if self.bites else 0.0

    def _on_started(self, event: GameStartedEvent) -> None:
        self.reset()

    def _on_cast(self, event: CastStartedEvent) -> None:
        self.casts += 1

    def _on_resolved(self, event: CastResolvedEvent) -> None:
        if event.struck_fish_id is None:
            self.empty_casts += 1

    def _on_hooked(self, event: FishHookedEvent) -> None:
        self.bites += 1

    def _on_caught(self, event: FishCaughtEvent) -> None:
        self.catches += 1
        self.caught_by_species[event.species] += 1
        self.earned_by_species[event.species] += event.value

    def _on_lost(self, event: FishLostEvent) -> None:
        self.losses[event.reason] += 1
        logger.debug("Fish %d lost (%s)", event.fish_id, event.reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "casts": self.casts,
            "empty_casts": self.empty_casts,
            "bites": self.bites,
            "catches": self.catches,
            "catch_rate": round(self.catch_rate, 3),
            "losses": dict(self.losses),
            "caught_by_species": dict(self.caught_by_species),
            "earned_by_species": dict(self.earned_by_species),
        }
