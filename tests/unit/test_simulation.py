"""Unit tests for the batch simulator."""

from __future__ import annotations

import pytest

from warcouncil.domain.enums import ActionType, RiskLevel
from warcouncil.domain.models import KingdomID, ResourceAllocation, StrategicDecision
from warcouncil.services.combat_service import CombatService
from warcouncil.services.simulation import BatchSimulator, GameFailure

RACES = {"Human": 1, "Droben": 1}


def test_games_complete_and_are_deterministic():
    first = BatchSimulator(max_turns=10).run(2, RACES)
    second = BatchSimulator(max_turns=10).run(2, RACES)

    assert first.completed == 2
    assert not first.failures
    assert not first.cancelled
    assert first.results == second.results
    assert all(result.turns <= 10 for result in first.results)
    assert sum(first.race_wins.values()) == 2


def test_threaded_run_matches_sequential_run():
    sequential = BatchSimulator(max_turns=8).run(3, RACES)
    threaded = BatchSimulator(max_turns=8).run(3, RACES, workers=2)
    assert threaded.results == sequential.results


def test_failed_game_does_not_stop_the_batch():
    class FlakySimulator(BatchSimulator):
        def run_game(self, index, races):
            if index == 1:
                raise RuntimeError("boom")
            return super().run_game(index, races)

    report = FlakySimulator(max_turns=5).run(3, RACES)

    assert [r.index for r in report.results] == [0, 2]
    assert report.failures == [GameFailure(index=1, error="boom")]


def test_cancellation_is_polled_between_games():
    calls = []

    def should_cancel():
        calls.append(None)
        return len(calls) > 1

    report = BatchSimulator(max_turns=5).run(4, RACES, should_cancel=should_cancel)

    assert report.cancelled
    assert report.completed == 1


@pytest.mark.parametrize(
    "races",
    [{"Orc": 2}, {"Human": 1}, {"Human": -1, "Elven": 3}],
)
def test_invalid_race_distribution(races):
    with pytest.raises(ValueError):
        BatchSimulator().run(1, races)


def test_negative_game_count():
    with pytest.raises(ValueError):
        BatchSimulator().run(-1, RACES)


def test_summary_statistics():
    report = BatchSimulator(max_turns=6).run(2, {"Human": 1, "Elven": 1, "Goblin": 1})
    assert set(report.race_wins) == {"Human", "Elven", "Goblin"}
    assert sum(report.race_win_rates.values()) == pytest.approx(1.0)
    assert 0 <= report.balance_score <= 100
    assert report.average_game_length == pytest.approx(6.0)


def test_apply_action_build_spends_and_grows():
    simulator = BatchSimulator(max_turns=1)
    world = simulator.new_world(0, RACES)
    kingdom = world.kingdoms()[0]
    land, gold = kingdom.resources.land, kingdom.resources.gold

    simulator.apply_action(
        world,
        CombatService(world),
        kingdom,
        StrategicDecision(
            ActionType.BUILD,
            10,
            allocation=ResourceAllocation(
                gold_spend=2500, turns_spend=1, expected_return=10.0, risk_level=RiskLevel.LOW
            ),
        ),
    )

    assert kingdom.resources.land == land + 5
    assert kingdom.resources.gold == gold - 2500
    assert kingdom.resources.turns == 19


def test_new_world_ids_are_per_game():
    world = BatchSimulator().new_world(4, {"Human": 2})
    assert [k.id for k in world.kingdoms()] == [KingdomID("g4-human-1"), KingdomID("g4-human-2")]


class RecordingCombat:
    def __init__(self) -> None:
        self.calls = []

    def attack(self, attacker_id, defender_id, **kwargs):
        self.calls.append((attacker_id, defender_id))

    def resolve_combat(self, attacker_id, defender_id, *args, **kwargs):
        raise AssertionError("not used")

    def battle_history(self):
        return []


def test_attack_action_goes_through_the_combat_boundary():
    simulator = BatchSimulator(max_turns=1)
    world = simulator.new_world(0, RACES)
    attacker, defender = world.kingdoms()
    combat = RecordingCombat()
    gold = attacker.resources.gold

    simulator.apply_action(
        world,
        combat,
        attacker,
        StrategicDecision(
            ActionType.ATTACK,
            10,
            target_id=defender.id,
            allocation=ResourceAllocation(
                gold_spend=0, turns_spend=4, expected_return=50.0, risk_level=RiskLevel.MEDIUM
            ),
        ),
    )

    assert combat.calls == [(attacker.id, defender.id)]
    assert attacker.resources.gold == gold
    assert attacker.resources.turns == 16
