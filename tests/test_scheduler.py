"""Tests for the deferred task scheduler."""

from angler.scheduler import DeferredScheduler


def test_runs_in_due_order():
    scheduler = DeferredScheduler()
    ran = []
    scheduler.schedule("b", 200, lambda: ran.append("b"), now_ms=0)
    scheduler.schedule("a", 100, lambda: ran.append("a"), now_ms=0)
    scheduler.schedule("c", 100, lambda: ran.append("c"), now_ms=0)

    assert scheduler.next_due() == 100
    assert scheduler.run_due(150) == 2
    assert ran == ["a", "c"]
    assert scheduler.run_due(200) == 1
    assert ran == ["a", "c", "b"]
    assert len(scheduler) == 0


def test_not_run_before_due():
    scheduler = DeferredScheduler()
    ran = []
    scheduler.schedule("x", 500, lambda: ran.append("x"), now_ms=1000)
    assert scheduler.run_due(1499) == 0
    assert scheduler.is_pending("x")
    assert scheduler.run_due(1500) == 1
    assert ran == ["x"]


def test_same_name_replaces_pending_task():
    scheduler = DeferredScheduler()
    ran = []
    scheduler.schedule("reel", 100, lambda: ran.append(1), now_ms=0)
    scheduler.schedule("reel", 300, lambda: ran.append(2), now_ms=0)

    assert scheduler.pending == ["reel"]
    scheduler.run_due(1000)
    assert ran == [2]


def test_cancel_prevents_run():
    scheduler = DeferredScheduler()
    ran = []
    scheduler.schedule("x", 10, lambda: ran.append("x"), now_ms=0)
    assert scheduler.cancel("x")
    assert not scheduler.cancel("x")
    assert scheduler.run_due(100) == 0
    assert ran == []
    assert scheduler.next_due() is None


def test_cancel_all_drops_old_generation():
    scheduler = DeferredScheduler()
    ran = []
    scheduler.schedule("a", 10, lambda: ran.append("a"), now_ms=0)
    scheduler.schedule("b", 20, lambda: ran.append("b"), now_ms=0)

    assert scheduler.cancel_all() == 1
    scheduler.schedule("c", 30, lambda: ran.append("c"), now_ms=0)

    assert scheduler.run_due(100) == 1
    assert ran == ["c"]
    assert scheduler.dropped_stale == 2


def test_negative_delay_runs_now():
    scheduler = DeferredScheduler()
    task = scheduler.schedule("x", -5, lambda: None, now_ms=40)
    assert task.due_ms == 40
