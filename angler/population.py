"""Fish population: spawning and boundary-reflection motion.

The population manager is the only writer of the live fish set. Motion is a
pure function of a fish's current state and the step size; the manager
swaps in the returned fish each frame.
"""

import logging
import math
import random
from dataclasses import replace
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from angler.config import ArenaConfig, PopulationConfig
from angler.config.fishing import SWIM_PHASE_MAX
from angler.entities import Fish
from angler.species import Species, draw_species, profile

logger = logging.getLogger(__name__)


def spawn_fish(
    count: int,
    rng: random.Random,
    arena: ArenaConfig,
    population: PopulationConfig,
    weights: Optional[Mapping[Species, float]] = None,
    first_id: int = 1,
) -> List[Fish]:
    """Create a batch of fish.

    Each individual gets an independent species draw, then its position,
    speed jitter, directions and swim phase, in that order.

    Args:
        count: Number of fish to create
        rng: Random source
        arena: Play field bounds and spawn band
        population: Jitter amplitudes
        weights: Optional species weight override
        first_id: Id given to the first fish; later fish count up from it

    Returns:
        The new fish, ids ascending
    """
    batch: List[Fish] = []
    for offset in range(count):
        species = draw_species(rng, weights)
        p = profile(species)
        batch.append(
            Fish(
                id=first_id + offset,
                species=species,
                x=rng.random() * arena.width,
                y=arena.spawn_y_min + rng.random() * arena.spawn_y_range,
                speed_x=p.base_speed_x + rng.random() * population.speed_jitter_x,
                speed_y=p.base_speed_y + rng.random() * population.speed_jitter_y,
                direction_x=1 if rng.random() > 0.5 else -1,
                direction_y=1 if rng.random() > 0.5 else -1,
                swim_angle=rng.random() * SWIM_PHASE_MAX,
                value=p.value,
                size=p.size,
            )
        )
    return batch


def _reflect(position: float, direction: int, low: float, high: float) -> Tuple[float, int]:
    """Flip direction and clamp when *position* reaches either bound."""
    if position <= low or position >= high:
        return max(low, min(high, position)), -direction
    return position, direction


def advance_fish(
    fish: Fish,
    arena: ArenaConfig,
    phase_increment: float,
    dt: float = 1.0,
) -> Fish:
    """Move one fish by *dt* frames and reflect it off the field bounds.

    Reflection happens in the same step as the move, so the returned fish is
    always inside ``[0, width] x [water_top, water_bottom]``.
    """
    x = fish.x + fish.speed_x * fish.direction_x * dt
    y = fish.y + fish.speed_y * fish.direction_y * math.sin(fish.swim_angle) * dt
    x, direction_x = _reflect(x, fish.direction_x, 0.0, arena.width)
    y, direction_y = _reflect(y, fish.direction_y, arena.water_top, arena.water_bottom)
    return replace(
        fish,
        x=x,
        y=y,
        direction_x=direction_x,
        direction_y=direction_y,
        swim_angle=fish.swim_angle + phase_increment * dt,
    )


class FishPopulation:
    """Owns the live fish set.

    Fish are keyed by id in insertion (spawn) order. Ids keep counting up
    across respawns so a detached copy can never be confused with a newer
    fish.
    """

    def __init__(self, arena: ArenaConfig, config: PopulationConfig, rng: random.Random) -> None:
        self.arena = arena
        self.config = config
        self.rng = rng
        self._fish: Dict[int, Fish] = {}
        self._next_id = 1

    def spawn(
        self,
        count: Optional[int] = None,
        weights: Optional[Mapping[Species, float]] = None,
    ) -> List[Fish]:
        """Spawn a batch and add it to the live set."""
        count = self.config.size if count is None else count
        batch = spawn_fish(count, self.rng, self.arena, self.config, weights, self._next_id)
        self._next_id += count
        for fish in batch:
            self._fish[fish.id] = fish
        logger.debug(
            "Spawned %d fish: %s",
            count,
            {s.value: sum(1 for f in batch if f.species is s) for s in Species},
        )
        return list(batch)

    def advance(self, dt: float = 1.0) -> List[Fish]:
        """Move every live fish by *dt* frames."""
        increment = self.config.swim_phase_increment
        for fish_id, fish in self._fish.items():
            self._fish[fish_id] = advance_fish(fish, self.arena, increment, dt)
        return self.fish

    def nearby(self, x: float, y: float, radius: float) -> List[Fish]:
        """Fish strictly within *radius* of (x, y) on both axes."""
        return [f for f in self._fish.values() if abs(f.x - x) < radius and abs(f.y - y) < radius]

    def add(self, fish: Fish) -> Fish:
        """Insert an existing fish (scripted scenarios, restored state)."""
        if fish.id in self._fish:
            raise ValueError(f"Fish id {fish.id} is already live")
        self._fish[fish.id] = fish
        self._next_id = max(self._next_id, fish.id + 1)
        return fish

    def remove(self, fish_id: int) -> Optional[Fish]:
        return self._fish.pop(fish_id, None)

    def clear(self) -> None:
        self._fish.clear()

    @property
    def fish(self) -> List[Fish]:
        return list(self._fish.values())

    def __contains__(self, fish_id: object) -> bool:
        return fish_id in self._fish

    def __iter__(self) -> Iterator[Fish]:
        return iter(list(self._fish.values()))

    def __len__(self) -> int:
        return len(self._fish)
