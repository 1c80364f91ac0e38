"""Tests for the species table and the weighted spawn draw."""

from collections import Counter

import pytest

from angler.species import SPECIES_TABLE, Species, default_weights, draw_species, profile
from tests.fakes.scripted_random import ScriptedRandom


class TestSpeciesTable:
    def test_value_rises_and_bite_chance_falls_with_size(self) -> None:
        ordered = [profile(s) for s in (Species.SMALL, Species.MEDIUM, Species.LARGE, Species.SHARK)]
        values = [p.value for p in ordered]
        bites = [p.bite_probability for p in ordered]
        assert values == sorted(values)
        assert bites == sorted(bites, reverse=True)

    def test_reference_rows(self) -> None:
        assert profile(Species.SMALL).value == 10
        assert profile(Species.SHARK).value == 100
        assert profile(Species.MEDIUM).bite_probability == pytest.approx(0.6)
        assert sum(default_weights().values()) == pytest.approx(1.0)
        assert len(SPECIES_TABLE) == 4


class TestDrawSpecies:
    @pytest.mark.parametrize(
        "draw, expected",
        [
            (0.0, Species.SMALL),
            (0.39, Species.SMALL),
            (0.5, Species.MEDIUM),
            (0.85, Species.LARGE),
            (0.95, Species.SHARK),
        ],
    )
    def test_single_draw_walks_cumulative_weights(self, draw, expected) -> None:
        rng = ScriptedRandom([draw])
        assert draw_species(rng) is expected
        assert rng.random_calls == 1

    def test_override_restricts_to_weighted_species(self) -> None:
        rng = ScriptedRandom([0.0, 0.5, 0.99])
        weights = {Species.SHARK: 3.0}
        assert {draw_species(rng, weights) for _ in range(3)} == {Species.SHARK}

    def test_unnormalised_weights(self) -> None:
        rng = ScriptedRandom([0.6])
        # total 4: small covers [0, 2), large covers [2, 4)
        weights = {Species.SMALL: 2.0, Species.LARGE: 2.0}
        assert draw_species(rng, weights) is Species.LARGE

    def test_no_positive_weight_raises(self) -> None:
        with pytest.raises(ValueError):
            draw_species(ScriptedRandom([0.5]), {Species.SMALL: 0.0})

    def test_frequencies_follow_weights(self, seeded_rng) -> None:
        counts = Counter(draw_species(seeded_rng) for _ in range(20000))
        for species, weight in default_weights().items():
            assert counts[species] / 20000 == pytest.approx(weight, abs=0.02)
