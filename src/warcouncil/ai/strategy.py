"""Strategy engine: turn a kingdom's state and personality into one action.

Candidate actions are produced by an ordered list of ``(action, predicate,
scorer)`` rules. A predicate checks the resource preconditions; a scorer
builds the decision (or returns ``None`` when nothing worthwhile exists).
The highest priority wins and equal priorities resolve in
:data:`TIE_BREAK_ORDER`.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from warcouncil.domain.combat import turn_cost
from warcouncil.domain.enums import ActionType, BuildStepType, GamePhase, Race, RiskLevel
from warcouncil.domain.models import (
    Kingdom,
    KingdomID,
    Personality,
    ResourceAllocation,
    StrategicDecision,
)
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig

TIE_BREAK_ORDER: tuple[ActionType, ...] = (
    ActionType.BUILD,
    ActionType.TRAIN,
    ActionType.ATTACK,
    ActionType.DEFEND,
)


@dataclass(frozen=True, slots=True)
class AllocationPriority:
    type: BuildStepType
    allocation: float
    reasoning: str


RACE_ALLOCATIONS: dict[Race, tuple[AllocationPriority, ...]] = {
    Race.HUMAN: (
        AllocationPriority(BuildStepType.ECONOMIC, 50, "Leverage tithe bonus"),
        AllocationPriority(BuildStepType.MILITARY, 30, "Balanced military"),
        AllocationPriority(BuildStepType.DEFENSIVE, 20, "Basic defense"),
    ),
    Race.DROBEN: (
        AllocationPriority(BuildStepType.MILITARY, 45, "Elite combat focus"),
        AllocationPriority(BuildStepType.ECONOMIC, 35, "Support military"),
        AllocationPriority(BuildStepType.DEFENSIVE, 20, "Minimal defense"),
    ),
    Race.ELVEN: (
        AllocationPriority(BuildStepType.DEFENSIVE, 40, "Defensive specialization"),
        AllocationPriority(BuildStepType.MILITARY, 35, "Quality training"),
        AllocationPriority(BuildStepType.ECONOMIC, 25, "Support infrastructure"),
    ),
    Race.GOBLIN: (
        AllocationPriority(BuildStepType.MILITARY, 50, "Early aggression"),
        AllocationPriority(BuildStepType.ECONOMIC, 25, "Minimal economy"),
        AllocationPriority(BuildStepType.DEFENSIVE, 25, "Basic defense"),
    ),
}


@dataclass(frozen=True, slots=True)
class CombatForecast:
    """Networth-based prediction of one attack."""

    target_id: KingdomID
    target_name: str
    land_gain_expected: int
    turn_cost: int
    success_probability: float
    efficiency: float
    war_declaration_risk: bool


@dataclass(slots=True)
class StrategyContext:
    kingdom: Kingdom
    personality: Personality
    rivals: Sequence[Kingdom]
    phase: GamePhase = GamePhase.EARLY
    attack_counts: Mapping[KingdomID, int] = field(default_factory=dict)
    protected: frozenset[KingdomID] = frozenset()
    rules: RulesConfig = DEFAULT_RULES


CandidateRule = tuple[
    ActionType,
    Callable[[StrategyContext], bool],
    Callable[[StrategyContext], StrategicDecision | None],
]


def game_phase(turn: int, *, rules: RulesConfig = DEFAULT_RULES) -> GamePhase:
    if turn <= rules.coordinator.early_phase_max_turn:
        return GamePhase.EARLY
    if turn <= rules.coordinator.mid_phase_max_turn:
        return GamePhase.MID
    return GamePhase.LATE


def personality_allocations(
    race: str | Race, personality: Personality, *, rules: RulesConfig = DEFAULT_RULES
) -> list[AllocationPriority]:
    """Race allocation template scaled by the personality's traits."""

    template = RACE_ALLOCATIONS.get(Race.parse(race), RACE_ALLOCATIONS[Race.HUMAN])
    traits = personality.traits
    factors = {
        BuildStepType.ECONOMIC: traits.economy,
        BuildStepType.MILITARY: traits.aggression,
        BuildStepType.DEFENSIVE: 2.0 - traits.risk,
    }
    low, high = rules.strategy.allocation_min, rules.strategy.allocation_max
    return [
        AllocationPriority(
            entry.type,
            max(low, min(high, entry.allocation * factors.get(entry.type, 1.0))),
            entry.reasoning,
        )
        for entry in template
    ]


def _risk_from_traits(personality: Personality) -> RiskLevel:
    if personality.traits.risk > 1.2:
        return RiskLevel.HIGH
    if personality.traits.risk < 0.8:
        return RiskLevel.LOW
    return RiskLevel.MEDIUM


def forecast_attack(
    attacker: Kingdom,
    defender: Kingdom,
    attack_count: int = 0,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> CombatForecast:
    ratio = attacker.networth / max(defender.networth, 1)
    if ratio >= 1.5:
        success, land_pct = 0.95, 0.0735
    elif ratio >= 1.2:
        success, land_pct = 0.85, 0.070
    elif ratio >= 0.8:
        success, land_pct = 0.65, 0.0679
    else:
        success, land_pct = 0.5, 0.0679
    cost = turn_cost(attacker.networth, defender.networth, rules=rules)
    land = math.floor(defender.resources.land * land_pct)
    return CombatForecast(
        target_id=defender.id,
        target_name=defender.name,
        land_gain_expected=land,
        turn_cost=cost,
        success_probability=success,
        efficiency=land / max(cost, 1),
        war_declaration_risk=attack_count >= rules.targeting.war_risk_attack_count,
    )


# --- Candidate rules ------------------------------------------------------------


def _can_build(ctx: StrategyContext) -> bool:
    cost = math.floor(ctx.kingdom.resources.land * ctx.rules.strategy.build_cost_per_acre)
    return ctx.kingdom.resources.gold >= cost


def _build(ctx: StrategyContext) -> StrategicDecision:
    strategy = ctx.rules.strategy
    personality = ctx.personality
    cost = math.floor(ctx.kingdom.resources.land * strategy.build_cost_per_acre)
    land = cost // strategy.gold_per_built_acre
    base = 8 if ctx.phase is GamePhase.EARLY else 5
    return StrategicDecision(
        action=ActionType.BUILD,
        priority=math.floor(base * personality.modifiers.build_priority / 10),
        reasoning=[f"Build {land} land for economic growth"],
        allocation=ResourceAllocation(
            gold_spend=cost,
            turns_spend=1,
            expected_return=land * 1000,
            risk_level=_risk_from_traits(personality),
        ),
        personality_influence=(
            f"{personality.name} ({personality.persona.value}) prioritizes "
            f"{personality.behavior.economic_strategy}"
        ),
    )


def _train_cost(kingdom: Kingdom, ctx: StrategyContext) -> int:
    strategy = ctx.rules.strategy
    return math.floor(kingdom.total_units * strategy.train_cost_per_unit + strategy.train_base_cost)


def _units_per_land(kingdom: Kingdom) -> float:
    return kingdom.total_units / max(kingdom.resources.land, 1)


def _can_train(ctx: StrategyContext) -> bool:
    return (
        ctx.kingdom.resources.gold >= _train_cost(ctx.kingdom, ctx)
        and _units_per_land(ctx.kingdom) <= ctx.rules.strategy.max_units_per_acre
    )


def _train(ctx: StrategyContext) -> StrategicDecision:
    ratio = _units_per_land(ctx.kingdom)
    cost = _train_cost(ctx.kingdom, ctx)
    return StrategicDecision(
        action=ActionType.TRAIN,
        priority=9 if ratio < ctx.rules.strategy.low_units_per_acre else 6,
        reasoning=[f"Train units to reach optimal ratio (current: {ratio:.2f}/land)"],
        allocation=ResourceAllocation(
            gold_spend=cost,
            turns_spend=1,
            expected_return=cost * 1.2,
            risk_level=RiskLevel.MEDIUM,
        ),
    )


def _can_attack(ctx: StrategyContext) -> bool:
    return ctx.kingdom.resources.turns >= ctx.rules.strategy.min_attack_turns


def viable_targets(ctx: StrategyContext) -> list[CombatForecast]:
    """Forecasts above the success cutoff, best land-per-turn first."""

    forecasts = [
        forecast_attack(
            ctx.kingdom, rival, ctx.attack_counts.get(rival.id, 0), rules=ctx.rules
        )
        for rival in ctx.rivals
        if rival.id != ctx.kingdom.id and rival.id not in ctx.protected
    ]
    viable = [
        forecast
        for forecast in forecasts
        if forecast.success_probability > ctx.rules.strategy.min_attack_success
    ]
    viable.sort(key=lambda forecast: forecast.efficiency, reverse=True)
    return viable


def _attack(ctx: StrategyContext) -> StrategicDecision | None:
    viable = viable_targets(ctx)
    if not viable:
        return None
    best = viable[0]
    return StrategicDecision(
        action=ActionType.ATTACK,
        priority=10 if best.efficiency > ctx.rules.strategy.high_efficiency else 7,
        reasoning=[
            f"Attack {best.target_name}: {best.land_gain_expected} land for "
            f"{best.turn_cost} turns ({best.efficiency:.1f} land/turn)"
        ],
        target_id=best.target_id,
        allocation=ResourceAllocation(
            gold_spend=0,
            turns_spend=best.turn_cost,
            expected_return=best.land_gain_expected * 1000,
            risk_level=RiskLevel.LOW if best.success_probability > 0.9 else RiskLevel.MEDIUM,
        ),
    )


def immediate_threats(ctx: StrategyContext) -> list[Kingdom]:
    strategy = ctx.rules.strategy
    floor_networth = ctx.kingdom.networth * strategy.rival_networth_ratio
    return [
        rival
        for rival in ctx.rivals
        if rival.id != ctx.kingdom.id
        and rival.networth > floor_networth
        and rival.resources.turns >= strategy.rival_min_turns
    ]


def _can_defend(ctx: StrategyContext) -> bool:
    return bool(immediate_threats(ctx))


def _defend(ctx: StrategyContext) -> StrategicDecision:
    threats = immediate_threats(ctx)
    cost = math.floor(ctx.kingdom.resources.gold * ctx.rules.strategy.defense_gold_fraction)
    return StrategicDecision(
        action=ActionType.DEFEND,
        priority=11 if len(threats) > 1 else 8,
        reasoning=[f"Strengthen defenses against {len(threats)} threats"],
        allocation=ResourceAllocation(
            gold_spend=cost,
            turns_spend=1,
            expected_return=cost * 0.8,
            risk_level=RiskLevel.LOW,
        ),
    )


CANDIDATE_RULES: tuple[CandidateRule, ...] = (
    (ActionType.BUILD, _can_build, _build),
    (ActionType.TRAIN, _can_train, _train),
    (ActionType.ATTACK, _can_attack, _attack),
    (ActionType.DEFEND, _can_defend, _defend),
)


def candidate_decisions(ctx: StrategyContext) -> list[StrategicDecision]:
    candidates: list[StrategicDecision] = []
    for _action, predicate, scorer in CANDIDATE_RULES:
        if not predicate(ctx):
            continue
        decision = scorer(ctx)
        if decision is not None:
            candidates.append(decision)
    return candidates


def select_decision(candidates: Sequence[StrategicDecision]) -> StrategicDecision | None:
    """Highest priority first; ties go to the earlier action in the tie-break order."""

    if not candidates:
        return None
    return min(
        candidates,
        key=lambda decision: (-decision.priority, TIE_BREAK_ORDER.index(decision.action)),
    )


def make_decision(ctx: StrategyContext) -> StrategicDecision:
    chosen = select_decision(candidate_decisions(ctx))
    if chosen is not None:
        return chosen
    personality = ctx.personality
    return StrategicDecision(
        action=ActionType.WAIT,
        priority=0,
        reasoning=["No viable actions available"],
        personality_influence=f"{personality.name} {personality.title} is being cautious",
    )


def strategic_advice(kingdom: Kingdom, others: Sequence[Kingdom]) -> list[str]:
    """Plain-language hints for a human player facing ``others``."""

    advice: list[str] = []
    networth = kingdom.networth
    stronger = [other for other in others if other.networth > networth * 1.2]
    weaker = [other for other in others if other.networth < networth * 0.8]
    if stronger:
        advice.append(f"{len(stronger)} stronger enemies detected - focus on defense and growth")
    if weaker:
        advice.append(f"{len(weaker)} viable targets available - consider expansion")
    if kingdom.resources.gold / max(kingdom.resources.land, 1) < 50:
        advice.append("Low gold reserves - prioritize economic buildings")
    return advice
