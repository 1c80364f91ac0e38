"""End-to-end tests for FishingEngine: intents, timing and session flow."""

import pytest

from angler.config import ChallengeConfig, GameConfig, SessionConfig
from angler.engine import Direction, FishingEngine
from angler.events import (
    CastResolvedEvent,
    ChallengeStartedEvent,
    FishCaughtEvent,
    FishLostEvent,
    GameOverEvent,
)
from angler.species import Species
from angler.state_machine import ChallengeState, LineMode
from angler.timing_challenge import ChallengeOutcome
from tests.fakes.factories import make_fish
from tests.fakes.scripted_random import ScriptedRandom


def _record(engine, *event_types):
    events: list = []
    for event_type in event_types:
        engine.event_bus.subscribe(event_type, events.append)
    return events


def _cast_to(engine, ticks=10):
    """Cast and let the line run out *ticks* line steps (8 px each)."""
    assert engine.toggle_line()
    engine.advance(ticks * engine.config.line.tick_ms)


def _hook_fish(engine, window=(0.5, 0.25)):
    """Cast onto a stationary small fish at (400, 300) and force the bite.

    The queued values are the bite trial (0.1 < 0.8) followed by the two
    target window draws.
    """
    engine.population.add(make_fish(fish_id=100, species=Species.SMALL, x=400.0, y=300.0))
    _cast_to(engine)
    engine.rng.push(0.1, *window)
    assert engine.toggle_line()


class TestStartGame:
    def test_fresh_engine_is_stopped(self, engine) -> None:
        snap = engine.snapshot()
        assert not snap.session.is_playing
        assert snap.fish == []
        assert snap.session.money == 120

    def test_start_spawns_and_resets(self, started_engine) -> None:
        snap = started_engine.snapshot()
        assert snap.session.is_playing
        assert (snap.session.money, snap.session.timer, snap.session.fish_caught) == (120, 137, 0)
        assert len(snap.fish) == 15
        assert snap.boat_x == 400
        assert snap.line.mode == "idle" and snap.line.length == 0
        assert snap.bite is None and snap.challenge is None

    def test_restart_is_idempotent(self, started_engine) -> None:
        started_engine.move_player(Direction.LEFT)
        started_engine.advance(3000)
        started_engine.start_game()
        first = started_engine.snapshot().session
        started_engine.start_game()
        second = started_engine.snapshot().session

        assert (first.money, first.timer, first.fish_caught) == (120, 137, 0)
        assert (second.money, second.timer, second.fish_caught) == (120, 137, 0)
        assert second.generation == first.generation + 1
        assert started_engine.boat_x == 400

    def test_same_seed_same_game(self) -> None:
        def play():
            engine = FishingEngine(seed=7)
            engine.start_game()
            engine.toggle_line()
            engine.advance(800)
            engine.toggle_line()
            engine.advance(2500)
            engine.move_player("right")
            engine.advance(1000)
            return engine.snapshot().to_dict()

        assert play() == play()


class TestMovePlayer:
    def test_ignored_when_not_playing(self, engine) -> None:
        assert not engine.move_player("left")
        assert engine.boat_x == 400

    def test_steps_left_and_right(self, started_engine) -> None:
        assert started_engine.move_player(Direction.LEFT)
        assert started_engine.boat_x == 385
        assert started_engine.move_player("right")
        assert started_engine.move_player("right")
        assert started_engine.boat_x == 415

    def test_rejected_at_lane_edges(self, started_engine) -> None:
        started_engine.boat_x = 80
        assert not started_engine.move_player("left")
        started_engine.boat_x = 720
        assert not started_engine.move_player("right")
        assert started_engine.boat_x == 720

    def test_boat_stays_in_field(self, started_engine) -> None:
        for _ in range(100):
            started_engine.move_player("left")
        assert 0 <= started_engine.boat_x <= 80
        for _ in range(100):
            started_engine.move_player("right")
        assert 720 <= started_engine.boat_x <= 750

    def test_unknown_direction_ignored(self, started_engine) -> None:
        assert not started_engine.move_player("up")
        assert started_engine.boat_x == 400


class TestLineFlow:
    def test_cast_stop_and_reel_in(self, scripted_engine) -> None:
        engine = scripted_engine
        events = _record(engine, CastResolvedEvent)

        _cast_to(engine)
        assert engine.line.mode is LineMode.EXTENDING
        assert engine.line.length == 80

        assert engine.toggle_line()
        assert engine.line.mode is LineMode.RETRACTING
        assert events[0].struck_fish_id is None
        assert events[0].candidates == 0

        # Slack until the reel-in delay elapses
        engine.advance(450)
        assert engine.line.length == 80
        engine.advance(50)
        assert engine.line.reeling

        engine.advance(400)
        assert engine.line.mode is LineMode.IDLE
        assert engine.line.length == 0

    def test_press_while_retracting_is_ignored(self, scripted_engine) -> None:
        _cast_to(scripted_engine, ticks=2)
        scripted_engine.toggle_line()
        assert not scripted_engine.toggle_line()
        assert scripted_engine.line.mode is LineMode.RETRACTING

    def test_ignored_when_not_playing(self, engine) -> None:
        assert not engine.toggle_line()
        assert engine.line.mode is LineMode.IDLE

    def test_immediate_stop_leaves_line_idle(self, scripted_engine) -> None:
        engine = scripted_engine
        assert engine.toggle_line()
        assert engine.toggle_line()

        assert engine.line.mode is LineMode.IDLE
        assert engine.line.length == 0
        assert not engine.scheduler.is_pending("reel_in")

        engine.advance(400)
        assert engine.line.mode is LineMode.IDLE
        assert engine.toggle_line()

    @pytest.mark.parametrize("ticks", [0, 1, 3])
    def test_stopped_line_is_empty_only_when_idle(self, scripted_engine, ticks) -> None:
        engine = scripted_engine
        _cast_to(engine, ticks)
        assert engine.toggle_line()

        for _ in range(100):
            assert (engine.line.length == 0) == (engine.line.mode is LineMode.IDLE)
            engine.advance(10)
        assert engine.line.mode is LineMode.IDLE


class TestCatchScenario:
    def test_bite_challenge_and_catch(self, scripted_engine) -> None:
        engine = scripted_engine
        caught = _record(engine, FishCaughtEvent)
        started = _record(engine, ChallengeStartedEvent)

        _hook_fish(engine)

        # The struck fish left the pond and is held by the bite
        assert len(engine.population) == 0
        snap = engine.snapshot()
        assert snap.bite is not None
        assert snap.bite.fish.id == 100
        assert not engine.toggle_line()

        engine.advance(1000)
        assert engine.bite is None
        assert engine.challenge.is_active
        assert started[0].window_start == 60.0
        assert started[0].window_end == 75.0
        assert not engine.move_player("left")

        while engine.challenge.progress < 65:
            engine.tick_frame()
        assert engine.challenge.progress == 66.0

        result = engine.attempt_catch()
        assert result.outcome is ChallengeOutcome.CAUGHT
        snap = engine.snapshot()
        assert snap.session.money == 130
        assert snap.session.fish_caught == 1
        assert snap.last_caught.species == "small"
        assert snap.challenge.state == "resolved"
        assert snap.challenge.success
        assert caught[0].money == 130

        # No second credit from a second press
        assert engine.attempt_catch() is None
        assert engine.session.money == 130
        assert not engine.toggle_line()

        engine.advance(1000)
        snap = engine.snapshot()
        assert snap.challenge is None
        assert snap.last_caught is None
        assert engine.toggle_line()

    def test_spawned_small_fish_is_caught(self, scripted_engine) -> None:
        engine = scripted_engine
        _cast_to(engine)

        # species, x, y, speed jitter x/y, headings x/y, swim phase
        engine.rng.push(0.1, 0.5, 0.0, 0.0, 0.0, 0.9, 0.9, 0.0)
        (fish,) = engine.population.spawn(1)
        assert fish.species is Species.SMALL
        assert (fish.x, fish.y) == (400.0, 280.0)

        engine.rng.push(0.1, 0.5, 0.25)
        assert engine.toggle_line()
        assert engine.bite.fish.id == fish.id

        engine.advance(1000)
        while engine.challenge.progress < 65:
            engine.tick_frame()
        assert engine.attempt_catch().outcome is ChallengeOutcome.CAUGHT
        assert engine.session.money == 130
        assert engine.session.fish_caught == 1

    def test_missed_attempt_loses_fish(self, scripted_engine) -> None:
        engine = scripted_engine
        lost = _record(engine, FishLostEvent)
        _hook_fish(engine)
        engine.advance(1000)

        while engine.challenge.progress < 10:
            engine.tick_frame()
        result = engine.attempt_catch()

        assert result.outcome is ChallengeOutcome.MISSED
        assert engine.session.money == 120
        assert engine.session.fish_caught == 0
        assert engine.challenge.state is ChallengeState.INACTIVE
        assert lost[0].reason == "missed"
        assert lost[0].fish_id == 100

    def test_bite_pulses_while_waiting(self, scripted_engine) -> None:
        _hook_fish(scripted_engine)
        for _ in range(10):
            scripted_engine.advance(37)
            intensity = scripted_engine.snapshot().bite.intensity
            assert 0.0 <= intensity <= 1.0

    def test_only_one_fish_bites(self) -> None:
        engine = FishingEngine(rng=ScriptedRandom())
        engine.start_game()
        engine.population.clear()
        engine.population.add(make_fish(fish_id=1, x=390.0, y=300.0))
        engine.population.add(make_fish(fish_id=2, x=410.0, y=305.0))
        _cast_to(engine)
        engine.rng.push(0.1, 0.1)
        engine.rng.push_choice(1)

        engine.toggle_line()

        assert engine.bite.fish.id == 2
        assert [f.id for f in engine.population] == [1]

    def test_attempt_without_challenge(self, started_engine) -> None:
        assert started_engine.attempt_catch() is None
        assert started_engine.session.money == 120

    def test_challenge_timeout(self) -> None:
        config = GameConfig(challenge=ChallengeConfig(timeout_ms=500))
        engine = FishingEngine(config=config, rng=ScriptedRandom())
        engine.start_game()
        engine.population.clear()
        lost = _record(engine, FishLostEvent)

        _hook_fish(engine)
        engine.advance(1000)
        assert engine.challenge.is_active
        engine.advance(500)

        assert not engine.challenge.is_present
        assert lost[0].reason == "timeout"
        assert engine.attempt_catch() is None


class TestGameOver:
    def test_time_up_stops_and_keeps_score(self) -> None:
        config = GameConfig(session=SessionConfig(time_budget_seconds=2))
        engine = FishingEngine(config=config, seed=3)
        over = _record(engine, GameOverEvent)
        engine.start_game()
        engine.session.credit(25)
        engine.toggle_line()

        engine.advance(2000)

        snap = engine.snapshot()
        assert snap.session.timer == 0
        assert not snap.session.is_playing
        assert snap.session.game_over
        assert snap.session.money == 145
        assert snap.line.mode == "idle" and snap.line.length == 0
        assert over[0].money == 145

        assert not engine.toggle_line()
        assert not engine.move_player("left")

        engine.start_game()
        assert engine.session.money == 120
        assert engine.session.timer == 2

    def test_pending_bite_is_cancelled_and_never_hands_off(self) -> None:
        config = GameConfig(session=SessionConfig(time_budget_seconds=1))
        engine = FishingEngine(config=config, rng=ScriptedRandom())
        engine.start_game()
        engine.population.clear()
        lost = _record(engine, FishLostEvent)

        _hook_fish(engine)  # stop press at t=500, hand-off due at t=1500
        engine.advance(2000)

        assert not engine.is_playing
        assert engine.bite is None
        assert not engine.challenge.is_present
        assert lost[0].reason == "cancelled"
        assert engine.scheduler.dropped_stale == 2

    def test_restart_drops_tasks_from_previous_game(self, scripted_engine) -> None:
        engine = scripted_engine
        _hook_fish(engine)
        engine.start_game()
        engine.advance(2000)

        assert not engine.challenge.is_present
        assert engine.line.mode is LineMode.IDLE
        assert engine.session.money == 120


def test_frames_only_run_while_playing(engine) -> None:
    engine.advance(1000)
    assert engine.snapshot().fish == []
    engine.start_game()
    before = [f.x for f in engine.population]
    engine.advance(90)
    after = [f.x for f in engine.population]
    assert before != after
    assert engine.snapshot().frame == 5


@pytest.mark.parametrize("dt", [0, -5])
def test_non_positive_advance_is_a_noop(started_engine, dt) -> None:
    before = started_engine.now_ms
    assert started_engine.advance(dt) == 0
    assert started_engine.now_ms == before
