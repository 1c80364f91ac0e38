"""Pytest configuration and fixtures for angler tests."""

import random

import pytest

from angler.engine import FishingEngine
from tests.fakes.scripted_random import ScriptedRandom


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def scripted_rng():
    return ScriptedRandom(seed=42)


@pytest.fixture
def engine():
    """A stopped engine with a fixed seed."""
    return FishingEngine(seed=42)


@pytest.fixture
def started_engine(engine):
    engine.start_game()
    return engine


@pytest.fixture
def scripted_engine(scripted_rng):
    """A running engine on a scripted RNG with an empty pond.

    Tests place the fish they need with ``make_fish`` and queue the random
    values the next bite or window draw should see.
    """
    engine = FishingEngine(rng=scripted_rng)
    engine.start_game()
    engine.population.clear()
    return engine
