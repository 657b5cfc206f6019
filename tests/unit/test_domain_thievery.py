"""Unit tests for thievery rules."""

from __future__ import annotations

import math

import pytest

from warcouncil.domain import thievery


class FixedRandom:
    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value

    def uniform(self, low: float, high: float) -> float:
        return low

    def randint(self, low: int, high: int) -> int:
        return low

    def choice(self, options):
        return options[0]


class TestDetection:
    def test_below_minimum_scum_detects_nothing(self):
        assert thievery.detection_rate(50, "Human", 1000, "Human") == 0.0

    def test_equal_forces_split_evenly(self):
        assert thievery.detection_rate(1000, "Human", 1000, "Human") == pytest.approx(0.5)

    def test_detection_is_capped(self):
        assert thievery.detection_rate(10_000, "Human", 100, "Human") == pytest.approx(0.95)

    def test_racial_effectiveness_applies(self):
        human = thievery.detection_rate(1000, "Human", 1000, "Human")
        droben = thievery.detection_rate(1000, "Droben", 1000, "Human")
        assert droben < human


def test_optimal_scum_count_reaches_target_rate():
    count = thievery.optimal_scum_count(1000, "Human", "Human")
    assert count == 5667
    assert thievery.detection_rate(count, "Human", 1000, "Human") >= 0.85


def test_optimal_scum_count_never_below_minimum():
    assert thievery.optimal_scum_count(0, "Human", "Human") == 100


class TestTheft:
    def test_undetected_theft_succeeds(self):
        outcome = thievery.theft_outcome(
            1000, "Human", 1000, "Human", 1_000_000, rng=FixedRandom(0.0)
        )
        assert outcome.success
        assert outcome.stolen == 100_000
        assert outcome.casualties == 15

    def test_detected_theft_fails(self):
        outcome = thievery.theft_outcome(
            1000, "Human", 1000, "Human", 1_000_000, rng=FixedRandom(0.99)
        )
        assert not outcome.success
        assert outcome.stolen == 0
        assert outcome.casualties == 50

    def test_theft_is_capped(self):
        outcome = thievery.theft_outcome(
            1000, "Human", 0, "Human", 10**9, rng=FixedRandom(0.0)
        )
        assert outcome.stolen == 3_500_000


def test_scum_casualties_depend_on_survival():
    assert thievery.scum_casualties(1000, "green", "steal", "Human") == 17
    assert thievery.scum_casualties(1000, "green", "steal", "Vampire") == 15


def test_operation_turn_cost():
    assert thievery.operation_turn_cost("burn") == 4
    with pytest.raises(ValueError):
        thievery.operation_turn_cost("arson")


def test_protection_levels():
    levels = thievery.protection_levels(5000, "medium", "Human")
    assert levels.minimum == 500
    assert levels.recommended == 2000
    assert levels.optimal >= levels.recommended


def test_layered_defense_rewards_even_split_for_small_kingdoms():
    assert thievery.layered_defense(10_000, 500, 500).effectiveness == pytest.approx(1.0)
    assert thievery.layered_defense(10_000, 0, 1000).effectiveness == pytest.approx(0.5)


def test_scum_cost_effectiveness_unknown_race():
    result = thievery.scum_cost_effectiveness(1000, "Orc", 100, 10)
    assert result.efficiency == 0.0
    assert math.isinf(result.cost_per_protection)


def test_scum_cost_effectiveness_known_race():
    result = thievery.scum_cost_effectiveness(1000, "Human", 100, 10)
    assert result.protection_value == pytest.approx(1000)
    assert result.efficiency == pytest.approx(1000 / 110)
