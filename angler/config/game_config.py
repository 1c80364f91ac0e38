"""Lightweight game configuration helpers.

Every tunable number the engine reads lives on one of these dataclasses so a
test (or the backend, via ``ANGLER_CONFIG``) can override a single value
without touching the constant modules.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional

from angler.config.display import (
    BOAT_MAX_X,
    BOAT_MIN_X,
    BOAT_START_X,
    BOAT_STEP,
    FIELD_WIDTH,
    FRAME_RATE,
    SPAWN_Y_MIN,
    SPAWN_Y_RANGE,
    WATER_BOTTOM,
    WATER_TOP,
)
from angler.config.fishing import (
    BITE_HANDOFF_MS,
    BITE_PULSE_PERIOD_MS,
    BITE_RADIUS,
    CAUGHT_DISPLAY_MS,
    CHALLENGE_PROGRESS_MAX,
    CHALLENGE_PROGRESS_STEP,
    CHALLENGE_TIMEOUT_MS,
    LINE_EXTEND_STEP,
    LINE_MAX_LENGTH,
    LINE_RETRACT_STEP,
    LINE_TICK_MS,
    POPULATION_SIZE,
    RETRACT_DELAY_MS,
    SPEED_JITTER_X,
    SPEED_JITTER_Y,
    SWIM_PHASE_INCREMENT,
    WATER_SURFACE_Y,
    WINDOW_END_BASE,
    WINDOW_END_SPREAD,
    WINDOW_MIN_WIDTH,
    WINDOW_START_BASE,
    WINDOW_START_SPREAD,
)
from angler.config.session import COUNTDOWN_TICK_MS, STARTING_MONEY, TIME_BUDGET_SECONDS
from angler.exceptions import ConfigurationError


@dataclass
class ArenaConfig:
    """Play field bounds, spawn band and boat movement."""

    width: float = FIELD_WIDTH
    water_top: float = WATER_TOP
    water_bottom: float = WATER_BOTTOM
    spawn_y_min: float = SPAWN_Y_MIN
    spawn_y_range: float = SPAWN_Y_RANGE
    frame_rate: int = FRAME_RATE
    boat_start_x: float = BOAT_START_X
    boat_step: float = BOAT_STEP
    boat_min_x: float = BOAT_MIN_X
    boat_max_x: float = BOAT_MAX_X


@dataclass
class PopulationConfig:
    """Population size and per-fish kinematics."""

    size: int = POPULATION_SIZE
    speed_jitter_x: float = SPEED_JITTER_X
    speed_jitter_y: float = SPEED_JITTER_Y
    swim_phase_increment: float = SWIM_PHASE_INCREMENT


@dataclass
class LineConfig:
    """Fishing line actuator."""

    tick_ms: float = LINE_TICK_MS
    extend_step: float = LINE_EXTEND_STEP
    retract_step: float = LINE_RETRACT_STEP
    max_length: float = LINE_MAX_LENGTH
    water_surface_y: float = WATER_SURFACE_Y
    retract_delay_ms: float = RETRACT_DELAY_MS


@dataclass
class BiteConfig:
    """Bite query radius and bite-to-challenge hand-off."""

    radius: float = BITE_RADIUS
    handoff_ms: float = BITE_HANDOFF_MS
    pulse_period_ms: float = BITE_PULSE_PERIOD_MS


@dataclass
class ChallengeConfig:
    """Timing challenge oscillator and target window draw."""

    progress_step: float = CHALLENGE_PROGRESS_STEP
    progress_max: float = CHALLENGE_PROGRESS_MAX
    window_start_base: float = WINDOW_START_BASE
    window_start_spread: float = WINDOW_START_SPREAD
    window_end_base: float = WINDOW_END_BASE
    window_end_spread: float = WINDOW_END_SPREAD
    window_min_width: float = WINDOW_MIN_WIDTH
    caught_display_ms: float = CAUGHT_DISPLAY_MS
    timeout_ms: Optional[float] = CHALLENGE_TIMEOUT_MS


@dataclass
class SessionConfig:
    """Starting stake and countdown budget."""

    starting_money: int = STARTING_MONEY
    time_budget_seconds: int = TIME_BUDGET_SECONDS
    countdown_tick_ms: float = COUNTDOWN_TICK_MS


_SECTIONS = {
    "arena": ArenaConfig,
    "population": PopulationConfig,
    "line": LineConfig,
    "bite": BiteConfig,
    "challenge": ChallengeConfig,
    "session": SessionConfig,
}


@dataclass
class GameConfig:
    """Complete engine configuration.

    Attributes:
        arena: Play field and boat settings.
        population: Spawn count and kinematics.
        line: Line speeds, cap and reel delay.
        bite: Query radius and bite hand-off delay.
        challenge: Catch minigame tuning.
        session: Economy starting values.
    """

    arena: ArenaConfig = field(default_factory=ArenaConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    line: LineConfig = field(default_factory=LineConfig)
    bite: BiteConfig = field(default_factory=BiteConfig)
    challenge: ChallengeConfig = field(default_factory=ChallengeConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    @property
    def frame_ms(self) -> float:
        return 1000.0 / self.arena.frame_rate

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "GameConfig":
        """Build a config from a (possibly partial) nested mapping.

        Raises:
            ConfigurationError: On unknown sections or keys.
        """
        unknown = set(data) - set(_SECTIONS)
        if unknown:
            raise ConfigurationError(f"Unknown config sections: {sorted(unknown)}")

        sections = {}
        for name, cls in _SECTIONS.items():
            values = data.get(name) or {}
            if not isinstance(values, dict):
                raise ConfigurationError(f"Config section '{name}' must be a mapping")
            known = {f.name for f in fields(cls)}
            bad = set(values) - known
            if bad:
                raise ConfigurationError(f"Unknown keys in '{name}': {sorted(bad)}")
            sections[name] = cls(**values)

        config = GameConfig(**sections)
        config.validate()
        return config

    def validate(self) -> None:
        """Check cross-field consistency.

        Raises:
            ConfigurationError: If any value would push state outside its domain.
        """
        f = self.arena
        if f.width <= 0 or f.water_bottom <= f.water_top:
            raise ConfigurationError("Play field must have positive width and height")
        if f.frame_rate <= 0:
            raise ConfigurationError("frame_rate must be positive")
        if not 0 <= f.boat_min_x < f.boat_max_x <= f.width:
            raise ConfigurationError("Boat bounds must lie inside the play field")
        if self.population.size < 0:
            raise ConfigurationError("Population size cannot be negative")

        line = self.line
        if line.tick_ms <= 0 or line.extend_step <= 0 or line.retract_step <= 0:
            raise ConfigurationError("Line tick and steps must be positive")
        if line.max_length <= 0:
            raise ConfigurationError("Line max_length must be positive")
        if line.retract_delay_ms < 0 or self.bite.handoff_ms < 0:
            raise ConfigurationError("Delays cannot be negative")

        c = self.challenge
        if c.progress_step <= 0 or c.progress_step >= c.progress_max:
            raise ConfigurationError("progress_step must be in (0, progress_max)")
        lowest = min(c.window_start_base, c.window_end_base)
        highest = max(
            c.window_start_base + c.window_start_spread,
            c.window_end_base + c.window_end_spread,
        )
        if lowest < 0 or highest > c.progress_max:
            raise ConfigurationError("Target window draws must stay inside [0, progress_max]")
        if c.window_min_width <= 0 or c.window_min_width >= c.progress_max:
            raise ConfigurationError("window_min_width must be in (0, progress_max)")
        if c.timeout_ms is not None and c.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive or None")

        s = self.session
        if s.time_budget_seconds <= 0 or s.countdown_tick_ms <= 0:
            raise ConfigurationError("Session budget and countdown tick must be positive")
