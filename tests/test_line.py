"""Tests for the fishing line actuator."""

import pytest

from angler.config import LineConfig
from angler.line import LineController
from angler.state_machine import LineMode


@pytest.fixture
def line():
    return LineController(LineConfig(), track_history=True)


def test_starts_idle_and_empty(line):
    assert line.mode is LineMode.IDLE
    assert line.length == 0
    assert line.state.is_idle


def test_extends_by_step_per_tick(line):
    assert line.start_cast().is_ok()
    lengths = [line.length]
    for _ in range(5):
        line.tick()
        lengths.append(line.length)
    assert lengths == [0, 8, 16, 24, 32, 40]


def test_extension_holds_at_cap(line):
    line.start_cast()
    for _ in range(60):
        line.tick()
    assert line.length == 350
    assert line.mode is LineMode.EXTENDING


def test_stopped_line_is_slack_until_reel_begins(line):
    line.start_cast()
    for _ in range(10):
        line.tick()
    assert line.stop_cast().is_ok()
    assert line.mode is LineMode.RETRACTING
    assert not line.reeling

    line.tick()
    line.tick()
    assert line.length == 80

    assert line.begin_reel()
    line.tick()
    assert line.length == 68


def test_reel_in_floors_at_zero_and_goes_idle_same_tick(line):
    line.start_cast()
    line.tick()
    line.tick()  # 16
    line.stop_cast()
    line.begin_reel()

    line.tick()
    assert line.length == 4
    assert line.mode is LineMode.RETRACTING

    line.tick()
    assert line.length == 0
    assert line.mode is LineMode.IDLE
    assert not line.reeling


def test_length_never_decreases_while_extending_or_increases_while_retracting(line):
    line.start_cast()
    previous = line.length
    for _ in range(20):
        line.tick()
        assert line.length >= previous
        previous = line.length
    line.stop_cast()
    line.begin_reel()
    while line.mode is LineMode.RETRACTING:
        line.tick()
        assert line.length <= previous
        previous = line.length
    assert line.length == 0


def test_cycle_is_one_way(line):
    assert line.stop_cast().is_err()
    line.start_cast()
    assert line.start_cast().is_err()
    assert not LineController(LineConfig()).begin_reel()


def test_hook_hangs_below_boat(line):
    line.start_cast()
    for _ in range(10):
        line.tick()
    assert line.hook_position(400.0) == (400.0, 300.0)


def test_reset_returns_to_idle(line):
    line.start_cast()
    line.tick()
    line.reset(at_ms=10.0)
    assert line.mode is LineMode.IDLE
    assert line.length == 0
    assert line.history[-1].reason.startswith("[RESET]")


def test_stop_before_any_payout_goes_straight_to_idle(line):
    line.start_cast()
    assert line.stop_cast().unwrap() is LineMode.IDLE
    assert line.length == 0
    assert not line.reeling
    assert [t.to_state for t in line.history[-2:]] == [LineMode.RETRACTING, LineMode.IDLE]
    assert line.start_cast().is_ok()
