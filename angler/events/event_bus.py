"""Synchronous event bus for domain event dispatch.

The EventBus decouples the engine from whatever wants to observe it
(statistics, logging, the backend). Dispatch is synchronous so handlers
run inside the same atomic engine step that produced the event.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


class EventBus:
    """Synchronous pub/sub keyed by event type.

    Example:
        bus = EventBus()
        bus.subscribe(GameOverEvent, on_game_over)
        bus.emit(GameOverEvent(generation=1, money=130, fish_caught=1, at_ms=137000.0))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = defaultdict(list)

    def emit(self, event: object) -> None:
        """Dispatch *event* to its handlers in registration order.

        A no-op when nothing is subscribed to the event's type.
        """
        handlers = self._handlers.get(type(event))
        if handlers:
            for handler in list(handlers):
                handler(event)

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> bool:
        """Remove a handler.

        Returns:
            True if handler was found and removed, False otherwise
        """
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def clear_subscribers(self) -> None:
        self._handlers.clear()

    def subscriber_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, []))
