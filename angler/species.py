"""Fish species and their balancing table.

Species form a closed set ordered by increasing size, value and rarity.
Everything that differs per species lives in ``SPECIES_TABLE``; tuning a
species means editing one row.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional


class Species(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    SHARK = "shark"


@dataclass(frozen=True)
class SpeciesProfile:
    """Per-species constants.

    Attributes:
        value: Money credited when caught
        size: Rendered size in pixels
        base_speed_x: Horizontal speed before spawn jitter
        base_speed_y: Vertical speed amplitude before spawn jitter
        bite_probability: Chance this fish strikes when near the hook
        spawn_weight: Relative frequency in the spawn draw
    """

    value: int
    size: int
    base_speed_x: float
    base_speed_y: float
    bite_probability: float
    spawn_weight: float


# Order matters: the spawn draw walks this table cumulatively.
# Bite probability falls as value rises (big fish are harder to hook).
SPECIES_TABLE: Dict[Species, SpeciesProfile] = {
    Species.SMALL: SpeciesProfile(10, 20, 2.0, 1.0, 0.8, 0.4),
    Species.MEDIUM: SpeciesProfile(25, 30, 1.5, 0.8, 0.6, 0.3),
    Species.LARGE: SpeciesProfile(50, 40, 1.0, 0.6, 0.4, 0.2),
    Species.SHARK: SpeciesProfile(100, 60, 0.8, 0.4, 0.2, 0.1),
}


def profile(species: Species) -> SpeciesProfile:
    return SPECIES_TABLE[species]


def default_weights() -> Dict[Species, float]:
    return {species: p.spawn_weight for species, p in SPECIES_TABLE.items()}


def draw_species(
    rng: random.Random,
    weights: Optional[Mapping[Species, float]] = None,
) -> Species:
    """Pick a species with one uniform draw against the cumulative weights.

    Weights are normalised, so they need not sum to 1. Species missing from
    *weights* never spawn. Iteration follows ``SPECIES_TABLE`` order so a
    given draw always maps to the same species.

    Args:
        rng: Random source
        weights: Optional override of the spawn weights

    Returns:
        The selected species
    """
    weights = weights if weights is not None else default_weights()
    ordered = [(s, weights.get(s, 0.0)) for s in SPECIES_TABLE]
    total = sum(w for _, w in ordered if w > 0)
    if total <= 0:
        raise ValueError("Species weights must contain at least one positive entry")

    u = rng.random() * total
    cumulative = 0.0
    last = None
    for species, weight in ordered:
        if weight <= 0:
            continue
        cumulative += weight
        last = species
        if u < cumulative:
            return species
    # Float rounding can leave u == total; fall back to the last eligible species
    return last
