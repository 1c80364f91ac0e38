"""Tests for bite resolution and bite feedback."""

import pytest

from angler.bite import BiteEvent, BiteResolver
from angler.species import Species
from tests.fakes.factories import make_fish
from tests.fakes.scripted_random import ScriptedRandom


def test_no_candidates_draws_nothing():
    rng = ScriptedRandom()
    assert BiteResolver(rng).resolve([]) is None
    assert rng.random_calls == 0


def test_trial_is_strictly_below_probability():
    fish = make_fish(species=Species.SMALL)  # p = 0.8
    assert BiteResolver(ScriptedRandom([0.79])).resolve([fish]) is fish
    assert BiteResolver(ScriptedRandom([0.8])).resolve([fish]) is None


def test_each_candidate_gets_one_trial_in_order():
    small = make_fish(fish_id=1, species=Species.SMALL)
    shark = make_fish(fish_id=2, species=Species.SHARK)  # p = 0.2
    rng = ScriptedRandom([0.9, 0.1])
    assert BiteResolver(rng).resolve([small, shark]) is shark
    assert rng.random_calls == 2
    assert rng.choice_calls == 0


def test_several_biters_pick_one_uniformly():
    fish = [make_fish(fish_id=i) for i in range(1, 4)]
    rng = ScriptedRandom([0.1, 0.1, 0.1])
    rng.push_choice(2)
    assert BiteResolver(rng).resolve(fish) is fish[2]
    assert rng.choice_calls == 1


def test_pick_among_biters_is_roughly_uniform(seeded_rng):
    fish = [make_fish(fish_id=i) for i in range(1, 3)]
    resolver = BiteResolver(seeded_rng)
    picks = [resolver.resolve(fish) for _ in range(4000)]
    hits = [p.id for p in picks if p is not None]
    assert hits.count(1) / len(hits) == pytest.approx(0.5, abs=0.05)


class TestBiteIntensity:
    def test_pulses_between_zero_and_one(self) -> None:
        bite = BiteEvent(fish=make_fish(), started_at_ms=1000.0)
        assert bite.update_intensity(1000.0, 250.0) == pytest.approx(1.0)
        assert bite.update_intensity(1125.0, 250.0) == pytest.approx(0.0, abs=1e-9)
        assert bite.update_intensity(1250.0, 250.0) == pytest.approx(1.0)
        for t in range(1000, 2000, 7):
            assert 0.0 <= bite.update_intensity(float(t), 250.0) <= 1.0
