"""Bite resolution: which fish (if any) strikes the hook.

Every fish near the hook gets an independent Bernoulli trial weighted by
its species. Among the fish whose trial succeeds, one is chosen uniformly.
At most one fish strikes per cast.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from angler.entities import Fish
from angler.species import profile

logger = logging.getLogger(__name__)


@dataclass
class BiteEvent:
    """A strike waiting to hand off to the timing challenge.

    Attributes:
        fish: Detached copy of the struck fish (no longer in the population)
        started_at_ms: Simulation time of the strike
        intensity: 0..1 tug signal, feedback only
        active: False once handed off or cancelled
    """

    fish: Fish
    started_at_ms: float
    intensity: float = 1.0
    active: bool = True

    def update_intensity(self, now_ms: float, period_ms: float) -> float:
        elapsed = max(0.0, now_ms - self.started_at_ms)
        self.intensity = abs(math.cos(elapsed * math.pi / period_ms))
        return self.intensity


class BiteResolver:
    """Selects at most one striking fish from the candidates near the hook."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def trial(self, fish: Fish) -> bool:
        return self.rng.random() < profile(fish.species).bite_probability

    def resolve(self, candidates: Sequence[Fish]) -> Optional[Fish]:
        """Run one trial per candidate, in order, and pick among the successes.

        Args:
            candidates: Fish inside the bite radius

        Returns:
            The striking fish, or None if no trial succeeded
        """
        biters: List[Fish] = [fish for fish in candidates if self.trial(fish)]
        if not biters:
            logger.debug("No bite among %d candidate(s)", len(candidates))
            return None
        chosen = biters[0] if len(biters) == 1 else self.rng.choice(biters)
        logger.debug(
            "Bite: fish %d (%s) chosen from %d biter(s) of %d candidate(s)",
            chosen.id,
            chosen.species.value,
            len(biters),
            len(candidates),
        )
        return chosen
