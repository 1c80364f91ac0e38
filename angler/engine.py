"""Headless fishing game engine.

``FishingEngine`` is the one object holding all mutable game state: the
live fish, the line, the pending bite, the timing challenge, the session
economy and the deferred-task queue. The presentation layer reads
``snapshot()`` between steps and writes intents through ``move_player``,
``toggle_line``, ``attempt_catch`` and ``start_game``.

Time only moves through ``advance(dt_ms)``, which replays the frame, line
and countdown ticks plus any deferred tasks in time order. Each tick or
task runs to completion before the next one starts, so no step ever sees a
half-applied transition from another.
"""

import logging
import random
from enum import Enum
from typing import Mapping, Optional

from angler.bite import BiteEvent, BiteResolver
from angler.clock import TickClock, TickKind
from angler.config import GameConfig
from angler.entities import Fish
from angler.events import (
    CastResolvedEvent,
    CastStartedEvent,
    ChallengeStartedEvent,
    EventBus,
    FishCaughtEvent,
    FishHookedEvent,
    FishLostEvent,
    GameOverEvent,
    GameStartedEvent,
)
from angler.line import LineController
from angler.population import FishPopulation
from angler.scheduler import DeferredScheduler
from angler.session import Session
from angler.snapshot import (
    BiteSnapshot,
    ChallengeSnapshot,
    FishSnapshot,
    GameSnapshot,
    LineSnapshot,
    SessionSnapshot,
)
from angler.species import Species
from angler.state_machine import LineMode
from angler.stats import SessionStats
from angler.timing_challenge import ChallengeOutcome, ChallengeResult, TimingChallenge

logger = logging.getLogger(__name__)

# Deferred task names
TASK_REEL_IN = "reel_in"
TASK_BITE_HANDOFF = "bite_handoff"
TASK_CAUGHT_DISPLAY = "caught_display"
TASK_CHALLENGE_TIMEOUT = "challenge_timeout"


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class FishingEngine:
    """A single fishing game.

    Attributes:
        config: Engine configuration (validated on construction)
        rng: Injected random source; every draw in the game goes through it
        event_bus: Domain events for observers
        population: Live fish
        line: Fishing line
        challenge: Catch minigame slot
        session: Money, countdown, catch counter
        boat_x: Boat horizontal position
        bite: Pending bite, if any
        last_caught: Transient record of the most recent catch
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventBus] = None,
        track_history: bool = False,
    ) -> None:
        """Build an engine in the stopped state.

        Args:
            config: Game configuration (defaults to the reference balancing)
            seed: Seed for a private ``random.Random`` when *rng* is not given
            rng: Random source to use instead of a seeded one
            event_bus: Bus to publish domain events on (a private one if None)
            track_history: Record state-machine transitions for debugging
        """
        self.config = config or GameConfig()
        self.config.validate()
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.event_bus = event_bus or EventBus()
        self.stats = SessionStats(self.event_bus)

        cfg = self.config
        self.scheduler = DeferredScheduler()
        self.clock = TickClock(
            frame_ms=cfg.frame_ms,
            line_ms=cfg.line.tick_ms,
            countdown_ms=cfg.session.countdown_tick_ms,
        )
        self.population = FishPopulation(cfg.arena, cfg.population, self.rng)
        self.line = LineController(cfg.line, track_history=track_history)
        self.bite_resolver = BiteResolver(self.rng)
        self.challenge = TimingChallenge(cfg.challenge, self.rng, track_history=track_history)
        self.session = Session(cfg.session)

        self.boat_x: float = cfg.arena.boat_start_x
        self.bite: Optional[BiteEvent] = None
        self.last_caught: Optional[Fish] = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def now_ms(self) -> float:
        return self.clock.now_ms

    @property
    def generation(self) -> int:
        return self.session.generation

    @property
    def is_playing(self) -> bool:
        return self.session.is_playing

    @property
    def frame_count(self) -> int:
        return self.clock.frames_elapsed()

    @property
    def bite_active(self) -> bool:
        return self.bite is not None and self.bite.active

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_game(self, weights: Optional[Mapping[Species, float]] = None) -> None:
        """Start (or restart) a session with a fresh population.

        Everything is reset: economy, boat, line, bite, challenge and the
        caught-fish record. Deferred tasks from the previous session are
        invalidated by moving to a new generation.
        """
        generation = self.scheduler.cancel_all()
        now = self.now_ms
        self.clock.restart(now)

        self.boat_x = self.config.arena.boat_start_x
        self.line.reset(now)
        self.challenge.reset(now)
        self.bite = None
        self.last_caught = None

        self.population.clear()
        self.population.spawn(weights=weights)
        self.session.start(generation, now)

        self.event_bus.emit(
            GameStartedEvent(
                generation=generation,
                money=self.session.money,
                timer=self.session.timer,
                population=len(self.population),
                at_ms=now,
            )
        )

    def _end_game(self) -> None:
        """Countdown hit zero: cancel everything in flight, keep the score."""
        now = self.now_ms
        self.scheduler.cancel_all()

        if self.bite_active:
            lost = self.bite.fish
            self.bite = None
            self._emit_lost(lost, "cancelled", None)
        loss = self.challenge.cancel(now)
        if loss is not None:
            self._emit_lost(loss.fish, loss.outcome.value, loss.progress)
        self.line.reset(now)
        self.last_caught = None

        self.event_bus.emit(
            GameOverEvent(
                generation=self.generation,
                money=self.session.money,
                fish_caught=self.session.fish_caught,
                at_ms=now,
            )
        )

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def move_player(self, direction) -> bool:
        """Move the boat one step left or right.

        Ignored outside a running session, while a timing challenge is on
        screen, and when the boat is already at the edge of its lane.

        Returns:
            True if the boat moved
        """
        if not self.is_playing or self.challenge.is_present:
            return False
        try:
            direction = Direction(direction)
        except ValueError:
            logger.debug("Ignoring unknown direction %r", direction)
            return False

        arena = self.config.arena
        if direction is Direction.LEFT and self.boat_x > arena.boat_min_x:
            self.boat_x = max(0.0, self.boat_x - arena.boat_step)
            return True
        if direction is Direction.RIGHT and self.boat_x < arena.boat_max_x:
            self.boat_x = min(arena.width, self.boat_x + arena.boat_step)
            return True
        return False

    def toggle_line(self) -> bool:
        """First press casts, second press stops the line and checks for a bite.

        Ignored outside a running session, while a bite or challenge is in
        progress, and while the line is coming back in.

        Returns:
            True if the press changed the line
        """
        if not self.is_playing or self.bite_active or self.challenge.is_present:
            return False

        mode = self.line.mode
        if mode is LineMode.IDLE:
            if self.line.start_cast(self.now_ms).is_err():
                return False
            self.event_bus.emit(
                CastStartedEvent(generation=self.generation, boat_x=self.boat_x, at_ms=self.now_ms)
            )
            return True
        if mode is LineMode.EXTENDING:
            self._stop_cast()
            return True
        return False

    def _stop_cast(self) -> None:
        now = self.now_ms
        self.line.stop_cast(now)
        hook_x, hook_y = self.line.hook_position(self.boat_x)
        candidates = self.population.nearby(hook_x, hook_y, self.config.bite.radius)
        struck = self.bite_resolver.resolve(candidates)

        if struck is not None:
            self.population.remove(struck.id)
            self.bite = BiteEvent(fish=struck.detached_copy(), started_at_ms=now)
            self.scheduler.schedule(
                TASK_BITE_HANDOFF, self.config.bite.handoff_ms, self._hand_off_bite, now
            )
            self.event_bus.emit(
                FishHookedEvent(
                    generation=self.generation,
                    fish_id=struck.id,
                    species=struck.species.value,
                    value=struck.value,
                    at_ms=now,
                )
            )

        self.event_bus.emit(
            CastResolvedEvent(
                generation=self.generation,
                hook_x=hook_x,
                hook_y=hook_y,
                candidates=len(candidates),
                struck_fish_id=struck.id if struck is not None else None,
                at_ms=now,
            )
        )
        if self.line.mode is LineMode.RETRACTING:
            self.scheduler.schedule(
                TASK_REEL_IN, self.config.line.retract_delay_ms, self.line.begin_reel, now
            )

    def attempt_catch(self) -> Optional[ChallengeResult]:
        """Resolve the active timing challenge.

        Returns:
            The challenge result, or None when no challenge was accepting attempts
        """
        if not self.is_playing:
            return None
        now = self.now_ms
        result = self.challenge.attempt(now)
        if result is None:
            return None
        self.scheduler.cancel(TASK_CHALLENGE_TIMEOUT)

        fish = result.fish
        if result.success:
            money = self.session.credit(fish.value)
            self.last_caught = fish
            self.scheduler.schedule(
                TASK_CAUGHT_DISPLAY,
                self.config.challenge.caught_display_ms,
                self._clear_caught,
                now,
            )
            self.event_bus.emit(
                FishCaughtEvent(
                    generation=self.generation,
                    fish_id=fish.id,
                    species=fish.species.value,
                    value=fish.value,
                    progress=result.progress,
                    money=money,
                    fish_caught=self.session.fish_caught,
                    at_ms=now,
                )
            )
            logger.debug("Caught %s worth %d (money=%d)", fish.species.value, fish.value, money)
        else:
            self._emit_lost(fish, ChallengeOutcome.MISSED.value, result.progress)
        return result

    # ------------------------------------------------------------------
    # Deferred tasks
    # ------------------------------------------------------------------

    def _hand_off_bite(self) -> None:
        if not self.bite_active:
            return
        bite = self.bite
        bite.active = False
        self.bite = None
        now = self.now_ms
        if self.challenge.activate(bite.fish, now).is_err():
            logger.warning("Bite on fish %d could not open a challenge", bite.fish.id)
            self._emit_lost(bite.fish, ChallengeOutcome.CANCELLED.value, None)
            return
        self.event_bus.emit(
            ChallengeStartedEvent(
                generation=self.generation,
                fish_id=bite.fish.id,
                window_start=self.challenge.window.start,
                window_end=self.challenge.window.end,
                at_ms=now,
            )
        )
        timeout = self.config.challenge.timeout_ms
        if timeout is not None:
            self.scheduler.schedule(TASK_CHALLENGE_TIMEOUT, timeout, self._expire_challenge, now)

    def _expire_challenge(self) -> None:
        loss = self.challenge.cancel(self.now_ms, ChallengeOutcome.TIMEOUT)
        if loss is not None:
            self._emit_lost(loss.fish, loss.outcome.value, loss.progress)

    def _clear_caught(self) -> None:
        self.challenge.finish(self.now_ms)
        self.last_caught = None

    def _emit_lost(self, fish: Fish, reason: str, progress: Optional[float]) -> None:
        self.event_bus.emit(
            FishLostEvent(
                generation=self.generation,
                fish_id=fish.id,
                species=fish.species.value,
                reason=reason,
                progress=progress,
                at_ms=self.now_ms,
            )
        )

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def tick_frame(self) -> None:
        """Per-frame work: fish motion, bite feedback, challenge progress."""
        if not self.is_playing:
            return
        self.population.advance()
        if self.bite_active:
            self.bite.update_intensity(self.now_ms, self.config.bite.pulse_period_ms)
        self.challenge.advance()

    def tick_line(self) -> None:
        if not self.is_playing:
            return
        self.line.tick(self.now_ms)

    def tick_countdown(self) -> None:
        if not self.is_playing:
            return
        if self.session.countdown(self.now_ms):
            self._end_game()

    def advance(self, dt_ms: float) -> int:
        """Move simulation time forward by *dt_ms* milliseconds.

        Periodic ticks and deferred tasks are processed in time order. At
        equal times, ticks go first (countdown, line, frame), then tasks.

        Returns:
            Number of periodic ticks processed
        """
        if dt_ms <= 0:
            return 0
        target = self.clock.now_ms + dt_ms
        processed = 0
        handlers = {
            TickKind.COUNTDOWN: self.tick_countdown,
            TickKind.LINE: self.tick_line,
            TickKind.FRAME: self.tick_frame,
        }
        while True:
            tick = self.clock.peek()
            task_due = self.scheduler.next_due()
            if task_due is not None and task_due < tick.at_ms:
                if task_due > target:
                    break
                self.clock.now_ms = max(self.clock.now_ms, task_due)
                task = self.scheduler.pop_due(self.clock.now_ms)
                if task is not None:
                    task.callback()
                continue
            if tick.at_ms > target:
                break
            self.clock.consume(tick.kind)
            handlers[tick.kind]()
            processed += 1
        self.clock.now_ms = target
        return processed

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        hook_x, hook_y = self.line.hook_position(self.boat_x)
        session = self.session
        return GameSnapshot(
            frame=self.frame_count,
            time_ms=self.now_ms,
            boat_x=self.boat_x,
            fish=[FishSnapshot.of(f) for f in self.population],
            line=LineSnapshot.of(self.line.state, hook_x, hook_y),
            bite=BiteSnapshot.of(self.bite),
            challenge=ChallengeSnapshot.of(self.challenge),
            session=SessionSnapshot(
                money=session.money,
                timer=session.timer,
                is_playing=session.is_playing,
                fish_caught=session.fish_caught,
                game_over=session.is_over,
                generation=session.generation,
            ),
            last_caught=FishSnapshot.of(self.last_caught) if self.last_caught else None,
            stats=self.stats.to_dict(),
        )
