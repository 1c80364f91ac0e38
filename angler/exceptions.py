"""Angler exception hierarchy.

Centralised base classes so callers can catch engine failures narrowly.
Invalid player intents are not errors; they are ignored by the engine.
"""


class AnglerError(Exception):
    """Root of all angler domain exceptions."""


class SimulationError(AnglerError):
    """Errors during simulation execution (engine, components)."""


class InvalidTransitionError(SimulationError, ValueError):
    """A state machine was asked for a transition its table forbids."""


class ConfigurationError(AnglerError):
    """Invalid or missing configuration."""
