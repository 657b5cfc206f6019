"""Unit tests for the strategy engine."""

from __future__ import annotations

import pytest

from warcouncil.ai import personality, strategy
from warcouncil.domain.enums import ActionType, BuildStepType, GamePhase
from warcouncil.domain.models import Kingdom, KingdomID, Resources, StrategicDecision


def _kingdom(
    kingdom_id: str, *, land: int = 1000, gold: int = 0, turns: int = 20, units=None
) -> Kingdom:
    return Kingdom(
        id=KingdomID(kingdom_id),
        name=kingdom_id.title(),
        race="Human",
        resources=Resources(gold=gold, land=land, population=1000, turns=turns),
        units=dict(units or {}),
    )


MERCHANT = personality.create_specific(KingdomID("me"), "Human", "merchant", "balanced")
BERSERKER = personality.create_specific(KingdomID("me"), "Droben", "berserker", "aggressive")


def _ctx(kingdom, rivals=(), persona=MERCHANT, **kwargs) -> strategy.StrategyContext:
    return strategy.StrategyContext(
        kingdom=kingdom, personality=persona, rivals=list(rivals), **kwargs
    )


@pytest.mark.parametrize(
    ("turn", "phase"),
    [(1, GamePhase.EARLY), (20, GamePhase.EARLY), (21, GamePhase.MID), (61, GamePhase.LATE)],
)
def test_game_phase(turn, phase):
    assert strategy.game_phase(turn) is phase


class TestSelection:
    def test_higher_priority_wins(self):
        chosen = strategy.select_decision(
            [
                StrategicDecision(ActionType.BUILD, 8),
                StrategicDecision(ActionType.TRAIN, 9),
            ]
        )
        assert chosen.action is ActionType.TRAIN

    def test_ties_follow_build_train_attack_defend(self):
        chosen = strategy.select_decision(
            [
                StrategicDecision(ActionType.DEFEND, 8),
                StrategicDecision(ActionType.ATTACK, 8),
                StrategicDecision(ActionType.BUILD, 8),
            ]
        )
        assert chosen.action is ActionType.BUILD

    def test_attack_beats_defend_on_tie(self):
        chosen = strategy.select_decision(
            [StrategicDecision(ActionType.DEFEND, 8), StrategicDecision(ActionType.ATTACK, 8)]
        )
        assert chosen.action is ActionType.ATTACK

    def test_no_candidates(self):
        assert strategy.select_decision([]) is None


def test_broke_kingdom_waits():
    decision = strategy.make_decision(_ctx(_kingdom("me", gold=0, turns=0)))
    assert decision.action is ActionType.WAIT
    assert decision.priority == 0
    assert decision.reasoning == ["No viable actions available"]


def test_rich_merchant_builds():
    decision = strategy.make_decision(_ctx(_kingdom("me", gold=100_000)))
    assert decision.action is ActionType.BUILD
    assert decision.priority == 14
    assert decision.allocation.gold_spend == 2500
    assert decision.reasoning == ["Build 5 land for economic growth"]


def test_under_trained_kingdom_trains_with_high_priority():
    ctx = _ctx(_kingdom("me", gold=5000, units={"tier1": 100}), persona=BERSERKER)
    candidates = {d.action: d for d in strategy.candidate_decisions(ctx)}
    assert candidates[ActionType.TRAIN].priority == 9
    assert candidates[ActionType.TRAIN].allocation.gold_spend == 2000


def test_aggressive_kingdom_attacks_weak_rival():
    me = _kingdom("me", land=1000)
    weak = _kingdom("weak", land=500)
    decision = strategy.make_decision(_ctx(me, [weak], persona=BERSERKER))

    assert decision.action is ActionType.ATTACK
    assert decision.target_id == "weak"
    assert decision.priority == 10
    assert decision.allocation.turns_spend == 4


def test_protected_rivals_are_never_targeted():
    me = _kingdom("me", land=1000)
    weak = _kingdom("weak", land=500)
    ctx = _ctx(me, [weak], persona=BERSERKER, protected=frozenset({KingdomID("weak")}))
    assert strategy.viable_targets(ctx) == []
    assert strategy.make_decision(ctx).action is not ActionType.ATTACK


def test_multiple_threats_trigger_defense():
    me = _kingdom("me", land=1000, gold=10_000)
    rivals = [_kingdom("big1", land=2000), _kingdom("big2", land=2000)]
    decision = strategy.make_decision(_ctx(me, rivals, persona=BERSERKER))
    assert decision.action is ActionType.DEFEND
    assert decision.priority == 11
    assert decision.allocation.gold_spend == 3000


def test_forecast_attack_against_half_size_target():
    forecast = strategy.forecast_attack(_kingdom("me", land=1000), _kingdom("t", land=500))
    assert forecast.success_probability == pytest.approx(0.95)
    assert forecast.land_gain_expected == 36
    assert forecast.turn_cost == 4
    assert forecast.efficiency == pytest.approx(9.0)
    assert not forecast.war_declaration_risk


def test_forecast_flags_war_risk_after_two_attacks():
    forecast = strategy.forecast_attack(_kingdom("me"), _kingdom("t"), attack_count=2)
    assert forecast.war_declaration_risk


def test_personality_allocations_are_clamped():
    allocations = {
        a.type: a.allocation for a in strategy.personality_allocations("Human", MERCHANT)
    }
    assert allocations[BuildStepType.ECONOMIC] == 70
    assert allocations[BuildStepType.MILITARY] == pytest.approx(30)
    assert allocations[BuildStepType.DEFENSIVE] == pytest.approx(22)


def test_strategic_advice():
    me = _kingdom("me", land=1000, gold=10_000)
    advice = strategy.strategic_advice(me, [_kingdom("big", land=5000), _kingdom("small", land=10)])
    assert any("stronger enemies" in line for line in advice)
    assert any("viable targets" in line for line in advice)
    assert any("Low gold reserves" in line for line in advice)
