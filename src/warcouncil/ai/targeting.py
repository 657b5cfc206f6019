"""Target selection: score every rival and plan a strike sequence."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from warcouncil.domain.combat import turn_cost
from warcouncil.domain.enums import PlanStepType, Recommendation
from warcouncil.domain.models import Kingdom, KingdomID
from warcouncil.domain.races import combat_bonus
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig


@dataclass(frozen=True, slots=True)
class CombatPrediction:
    success_probability: float
    expected_land_gain: int
    expected_gold: int
    turn_cost: int
    efficiency: float
    casualty_rate: float


@dataclass(frozen=True, slots=True)
class StrategicValue:
    threat_level: float
    resource_value: float
    position_value: float


@dataclass(frozen=True, slots=True)
class RiskAssessment:
    war_declaration_risk: bool
    retaliation_risk: float
    loss_risk: float


@dataclass(frozen=True, slots=True)
class TargetAnalysis:
    target_id: KingdomID
    target_name: str
    combat: CombatPrediction
    strategic: StrategicValue
    risk: RiskAssessment
    overall_score: float
    recommendation: Recommendation


@dataclass(frozen=True, slots=True)
class AttackStep:
    target_id: KingdomID
    attack_type: PlanStepType
    turn_cost: int
    expected_land: int
    expected_gold: int
    expected_outcome: str


@dataclass(slots=True)
class AttackPlan:
    primary_target_id: KingdomID
    alternative_target_ids: list[KingdomID] = field(default_factory=list)
    steps: list[AttackStep] = field(default_factory=list)

    @property
    def total_turns(self) -> int:
        return sum(step.turn_cost for step in self.steps)

    @property
    def expected_land(self) -> int:
        return sum(step.expected_land for step in self.steps)

    @property
    def expected_gold(self) -> int:
        return sum(step.expected_gold for step in self.steps)


def _networth_ratio(attacker: Kingdom, target: Kingdom) -> float:
    return attacker.networth / max(target.networth, 1)


def predict_combat(
    attacker: Kingdom, target: Kingdom, *, rules: RulesConfig = DEFAULT_RULES
) -> CombatPrediction:
    offense = combat_bonus(attacker.race).offense
    defense = combat_bonus(target.race).defense
    adjusted = _networth_ratio(attacker, target) * (1 + offense) / (1 + defense)

    if adjusted >= 1.5:
        success, land_pct, casualty = 0.95, 0.0735, 0.05
    elif adjusted >= 1.2:
        success, land_pct, casualty = 0.85, 0.070, 0.15
    elif adjusted >= 0.8:
        success, land_pct, casualty = 0.65, 0.0679, 0.15
    else:
        success, land_pct, casualty = 0.35, 0.0679, 0.30

    cost = turn_cost(attacker.networth, target.networth, rules=rules)
    land = math.floor(target.resources.land * land_pct * success)
    return CombatPrediction(
        success_probability=success,
        expected_land_gain=land,
        expected_gold=math.floor(target.resources.gold * rules.targeting.loot_fraction * success),
        turn_cost=cost,
        efficiency=land / max(cost, 1),
        casualty_rate=casualty,
    )


def threat_level(target: Kingdom, turn: int) -> float:
    """Mean of growth, military and resource pressure, each capped at 1."""

    growth = min(target.networth / max(turn, 1) / 5000, 1.0)
    military = min(target.total_units / 2000, 1.0)
    resources = min((target.resources.land + target.resources.gold / 1000) / 2000, 1.0)
    return (growth + military + resources) / 3


def assess_strategic_value(target: Kingdom, turn: int) -> StrategicValue:
    return StrategicValue(
        threat_level=threat_level(target, turn),
        resource_value=(target.resources.land * 1000 + target.resources.gold) / 100_000,
        position_value=0.8 if target.resources.land > 1000 else 0.5,
    )


def assess_risk(
    attacker: Kingdom,
    target: Kingdom,
    attack_count: int = 0,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> RiskAssessment:
    a_nw, t_nw = attacker.networth, target.networth
    return RiskAssessment(
        war_declaration_risk=attack_count >= rules.targeting.war_risk_attack_count,
        retaliation_risk=min(t_nw / max(a_nw, 1), 1.0),
        loss_risk=1 - a_nw / max(a_nw + t_nw, 1),
    )


def overall_score(
    combat: CombatPrediction,
    strategic: StrategicValue,
    risk: RiskAssessment,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    weights = rules.targeting
    score = (
        weights.efficiency_points * min(combat.efficiency / weights.efficiency_cap, 1.0)
        + weights.success_points * combat.success_probability
        + weights.strategic_points * (strategic.threat_level + strategic.resource_value)
        - weights.risk_points * (risk.retaliation_risk + risk.loss_risk)
    )
    if (
        risk.war_declaration_risk
        and combat.success_probability < weights.war_penalty_success_cutoff
    ):
        score -= weights.war_penalty
    return max(0.0, score)


def recommend(
    score: float, combat: CombatPrediction, *, rules: RulesConfig = DEFAULT_RULES
) -> Recommendation:
    buckets = rules.targeting
    if score >= buckets.prime_score and combat.efficiency >= buckets.prime_efficiency:
        return Recommendation.PRIME
    if score >= buckets.good_score and combat.success_probability >= buckets.good_success:
        return Recommendation.GOOD
    if score >= buckets.risky_score:
        return Recommendation.RISKY
    return Recommendation.AVOID


def analyze_target(
    attacker: Kingdom,
    target: Kingdom,
    *,
    turn: int = 1,
    attack_count: int = 0,
    rules: RulesConfig = DEFAULT_RULES,
) -> TargetAnalysis:
    combat = predict_combat(attacker, target, rules=rules)
    strategic = assess_strategic_value(target, turn)
    risk = assess_risk(attacker, target, attack_count, rules=rules)
    score = overall_score(combat, strategic, risk, rules=rules)
    return TargetAnalysis(
        target_id=target.id,
        target_name=target.name,
        combat=combat,
        strategic=strategic,
        risk=risk,
        overall_score=score,
        recommendation=recommend(score, combat, rules=rules),
    )


def analyze_targets(
    attacker: Kingdom,
    targets: Sequence[Kingdom],
    *,
    turn: int = 1,
    attack_counts: Mapping[KingdomID, int] | None = None,
    protected: frozenset[KingdomID] = frozenset(),
    rules: RulesConfig = DEFAULT_RULES,
) -> list[TargetAnalysis]:
    """Rank every other kingdom, best score first.

    ``protected`` kingdoms (e.g. under restoration) are never analysed.
    ``sorted`` is stable, so equal scores keep their input order.
    """

    counts = attack_counts or {}
    analyses = [
        analyze_target(
            attacker, target, turn=turn, attack_count=counts.get(target.id, 0), rules=rules
        )
        for target in targets
        if target.id != attacker.id and target.id not in protected
    ]
    return sorted(analyses, key=lambda analysis: analysis.overall_score, reverse=True)


def create_attack_plan(
    attacker: Kingdom,
    analyses: Sequence[TargetAnalysis],
    available_turns: int,
    targets: Mapping[KingdomID, Kingdom],
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> AttackPlan | None:
    """Controlled strike first, then full strikes while the ratio holds.

    Returns ``None`` when no analysis is ``prime`` or ``good``. Land losses
    between strikes are projected locally; ``targets`` is not modified.
    """

    prime = [a for a in analyses if a.recommendation is Recommendation.PRIME]
    good = [a for a in analyses if a.recommendation is Recommendation.GOOD]
    ranked = prime + good
    if not ranked:
        return None

    primary = ranked[0]
    settings = rules.targeting
    plan = AttackPlan(
        primary_target_id=primary.target_id,
        alternative_target_ids=[
            a.target_id for a in ranked[1 : 1 + settings.max_alternatives]
        ],
    )
    target = targets.get(primary.target_id)
    if target is None:
        return plan

    ratio = _networth_ratio(attacker, target)
    turns = available_turns
    land = target.resources.land
    gold = target.resources.gold
    strike_turns = settings.plan_strike_turns

    if turns >= strike_turns and ratio >= settings.controlled_strike_ratio:
        plan.steps.append(
            AttackStep(
                target_id=target.id,
                attack_type=PlanStepType.CONTROLLED_STRIKE,
                turn_cost=strike_turns,
                expected_land=math.floor(land * 0.01),
                expected_gold=math.floor(gold * 0.02),
                expected_outcome="Test defenses, minimal land gain",
            )
        )
        turns -= strike_turns

    while turns >= strike_turns and ratio >= settings.full_strike_ratio:
        gained = math.floor(land * 0.07)
        plan.steps.append(
            AttackStep(
                target_id=target.id,
                attack_type=PlanStepType.FULL_STRIKE,
                turn_cost=strike_turns,
                expected_land=gained,
                expected_gold=math.floor(gold * settings.loot_fraction),
                expected_outcome=f"{gained} land gain expected",
            )
        )
        turns -= strike_turns
        land = math.floor(land * 0.93)

    return plan


def targeting_advice(analyses: Sequence[TargetAnalysis]) -> list[str]:
    advice: list[str] = []
    prime = [a for a in analyses if a.recommendation is Recommendation.PRIME]
    good = [a for a in analyses if a.recommendation is Recommendation.GOOD]
    if prime:
        advice.append(
            f"{len(prime)} prime targets available with "
            f"{prime[0].combat.efficiency:.1f} land/turn efficiency"
        )
    if good:
        advice.append(f"{len(good)} good targets available for expansion")
    if any(a.risk.war_declaration_risk for a in analyses):
        advice.append("War declaration risk detected - consider diplomatic approach")
    return advice
