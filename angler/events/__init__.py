"""Events module for domain event dispatch.

Provides the EventBus plus typed domain event definitions emitted by the
fishing engine.
"""

from angler.events.domain_events import (
    CastResolvedEvent,
    CastStartedEvent,
    ChallengeStartedEvent,
    FishCaughtEvent,
    FishHookedEvent,
    FishLostEvent,
    GameOverEvent,
    GameStartedEvent,
)
from angler.events.event_bus import EventBus

__all__ = [
    "CastResolvedEvent",
    "CastStartedEvent",
    "ChallengeStartedEvent",
    "EventBus",
    "FishCaughtEvent",
    "FishHookedEvent",
    "FishLostEvent",
    "GameOverEvent",
    "GameStartedEvent",
]
