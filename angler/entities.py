"""Fish entity."""

from dataclasses import dataclass, replace

from angler.species import Species


@dataclass
class Fish:
    """A live fish in the play field.

    Attributes:
        id: Stable identifier, unique within one engine
        species: Species tag
        x: Horizontal position
        y: Vertical position (inside the water band)
        speed_x: Horizontal speed magnitude
        speed_y: Vertical speed amplitude
        direction_x: -1 or +1
        direction_y: -1 or +1
        swim_angle: Phase accumulator driving the vertical oscillation
        value: Money credited when caught
        size: Rendered size
    """

    id: int
    species: Species
    x: float
    y: float
    speed_x: float
    speed_y: float
    direction_x: int
    direction_y: int
    swim_angle: float
    value: int
    size: int

    def detached_copy(self) -> "Fish":
        """Copy held by a bite or challenge after the fish left the population."""
        return replace(self)
