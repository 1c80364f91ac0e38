"""Tests for the tick clock."""

import pytest

from angler.clock import TickClock, TickKind


def _drain(clock, until_ms):
    ticks = []
    while clock.peek().at_ms <= until_ms:
        tick = clock.peek()
        clock.consume(tick.kind)
        ticks.append((tick.kind, tick.at_ms))
    return ticks


def test_ticks_come_out_in_time_order():
    clock = TickClock(frame_ms=25, line_ms=50, countdown_ms=1000)
    ticks = _drain(clock, 100)
    assert ticks == [
        (TickKind.FRAME, 25),
        (TickKind.LINE, 50),
        (TickKind.FRAME, 50),
        (TickKind.FRAME, 75),
        (TickKind.LINE, 100),
        (TickKind.FRAME, 100),
    ]
    assert clock.now_ms == 100


def test_ties_break_countdown_line_frame():
    clock = TickClock(frame_ms=25, line_ms=50, countdown_ms=1000)
    ticks = [t for t in _drain(clock, 1000) if t[1] == 1000]
    assert [kind for kind, _ in ticks] == [TickKind.COUNTDOWN, TickKind.LINE, TickKind.FRAME]


def test_cadences_do_not_drift():
    clock = TickClock(frame_ms=1000 / 60, line_ms=50, countdown_ms=1000)
    _drain(clock, 60_000)
    assert clock.frames_elapsed() == pytest.approx(3600, abs=1)


def test_restart_reanchors_cadences():
    clock = TickClock(frame_ms=25, line_ms=50, countdown_ms=1000)
    _drain(clock, 980)
    clock.restart(990)
    assert clock.frames_elapsed() == 0
    assert clock.peek().at_ms == 1015
    # countdown now lands one full second after the restart
    ticks = _drain(clock, 2000)
    assert (TickKind.COUNTDOWN, 1990) in ticks
