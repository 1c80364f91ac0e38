"""Tests for the EventBus domain event dispatch system."""

from angler.events import (
    CastResolvedEvent,
    CastStartedEvent,
    EventBus,
    FishCaughtEvent,
    FishHookedEvent,
    FishLostEvent,
    GameOverEvent,
    GameStartedEvent,
)
from angler.stats import SessionStats


def _caught(fish_id=1, species="small", value=10):
    return FishCaughtEvent(
        generation=1,
        fish_id=fish_id,
        species=species,
        value=value,
        progress=66.0,
        money=130,
        fish_caught=1,
        at_ms=1500.0,
    )


class TestEventBus:
    """Test suite for EventBus functionality."""

    def test_emit_reaches_subscriber(self) -> None:
        """Verify events are delivered to subscribed handlers."""
        bus = EventBus()
        received: list = []
        bus.subscribe(FishCaughtEvent, received.append)

        event = _caught()
        bus.emit(event)

        assert received == [event]
        assert received[0] is event

    def test_no_subscribers_no_crash(self) -> None:
        bus = EventBus()
        bus.emit(GameOverEvent(generation=1, money=120, fish_caught=0, at_ms=137000.0))
        assert bus.subscriber_count(GameOverEvent) == 0

    def test_handlers_run_in_registration_order(self) -> None:
        bus = EventBus()
        order: list = []
        bus.subscribe(GameOverEvent, lambda e: order.append("first"))
        bus.subscribe(GameOverEvent, lambda e: order.append("second"))

        bus.emit(GameOverEvent(generation=1, money=120, fish_caught=0, at_ms=0.0))
        assert order == ["first", "second"]

    def test_dispatch_is_by_exact_type(self) -> None:
        bus = EventBus()
        received: list = []
        bus.subscribe(FishHookedEvent, received.append)
        bus.emit(_caught())
        assert received == []

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        received: list = []
        bus.subscribe(FishCaughtEvent, received.append)

        assert bus.unsubscribe(FishCaughtEvent, received.append)
        assert not bus.unsubscribe(FishCaughtEvent, received.append)
        bus.emit(_caught())
        assert received == []

    def test_clear_subscribers(self) -> None:
        bus = EventBus()
        bus.subscribe(FishCaughtEvent, lambda e: None)
        bus.subscribe(GameOverEvent, lambda e: None)
        bus.clear_subscribers()
        assert bus.subscriber_count(FishCaughtEvent) == 0
        assert bus.subscriber_count(GameOverEvent) == 0


class TestSessionStats:
    def test_counts_session_activity(self) -> None:
        bus = EventBus()
        stats = SessionStats(bus)

        bus.emit(CastStartedEvent(generation=1, boat_x=400.0, at_ms=0.0))
        bus.emit(CastResolvedEvent(1, 400.0, 300.0, 0, None, 500.0))
        bus.emit(CastStartedEvent(generation=1, boat_x=400.0, at_ms=1000.0))
        bus.emit(CastResolvedEvent(1, 400.0, 300.0, 2, 7, 1500.0))
        bus.emit(FishHookedEvent(generation=1, fish_id=7, species="shark", value=100, at_ms=1500.0))
        bus.emit(_caught(fish_id=7, species="shark", value=100))
        bus.emit(FishLostEvent(1, 8, "small", "missed", 12.0, 3000.0))

        data = stats.to_dict()
        assert data["casts"] == 2
        assert data["empty_casts"] == 1
        assert data["bites"] == 1
        assert data["catches"] == 1
        assert data["catch_rate"] == 1.0
        assert data["losses"] == {"missed": 1}
        assert data["caught_by_species"] == {"shark": 1}
        assert data["earned_by_species"] == {"shark": 100}

    def test_game_start_resets(self) -> None:
        bus = EventBus()
        stats = SessionStats(bus)
        bus.emit(CastStartedEvent(generation=1, boat_x=400.0, at_ms=0.0))
        bus.emit(GameStartedEvent(generation=2, money=120, timer=137, population=15, at_ms=0.0))
        assert stats.casts == 0
        assert stats.catch_rate == 0.0
