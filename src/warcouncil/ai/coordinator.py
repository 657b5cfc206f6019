"""Per-tick coordinator combining strategy, targeting, build and resource plans.

The coordinator is stateful only in its bounded decision history; all the
subsystems it calls are pure functions of the snapshot passed in.
"""

from __future__ import annotations

import logging
from collections import Counter, deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from warcouncil.ai import build_order, resources, strategy, targeting
from warcouncil.ai.build_order import BuildOrder
from warcouncil.ai.resources import ResourcePlan
from warcouncil.ai.targeting import AttackPlan, TargetAnalysis
from warcouncil.domain.enums import (
    ActionType,
    GamePhase,
    MarketCondition,
    Position,
    Recommendation,
    RiskLevel,
)
from warcouncil.domain.models import Kingdom, KingdomID, Personality, StrategicDecision
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig

if TYPE_CHECKING:
    from warcouncil.services.world import World

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GameStateAnalysis:
    phase: GamePhase
    threats: list[Kingdom]
    opportunities: list[Kingdom]
    rank: int
    position: Position
    market: MarketCondition
    recommendation: str


@dataclass(slots=True)
class ComprehensiveDecision:
    kingdom_id: KingdomID
    turn: int
    primary_action: StrategicDecision
    analysis: GameStateAnalysis
    build_order: BuildOrder
    target_analyses: list[TargetAnalysis]
    attack_plan: AttackPlan | None
    resource_plan: ResourcePlan
    confidence: float
    reasoning: list[str] = field(default_factory=list)
    advice: list[str] = field(default_factory=list)


def classify_position(rank: int, total: int, *, rules: RulesConfig = DEFAULT_RULES) -> Position:
    if rank == 1:
        return Position.DOMINANT
    if rank <= total * rules.coordinator.competitive_rank_fraction:
        return Position.COMPETITIVE
    if rank <= total * rules.coordinator.struggling_rank_fraction:
        return Position.STRUGGLING
    return Position.CRITICAL


def classify_market(threats: int, opportunities: int) -> MarketCondition:
    if threats <= 1 and opportunities >= 2:
        return MarketCondition.FAVORABLE
    if threats >= 3 or opportunities == 0:
        return MarketCondition.HOSTILE
    return MarketCondition.NEUTRAL


def strategic_recommendation(
    position: Position, market: MarketCondition, threats: int, opportunities: int
) -> str:
    if position is Position.DOMINANT and market is MarketCondition.FAVORABLE:
        return "Aggressive expansion to maintain dominance"
    if position is Position.CRITICAL:
        return "Defensive consolidation and recovery"
    if threats > opportunities:
        return "Defensive posture with selective strikes"
    return "Balanced growth with opportunistic expansion"


def analyze_game_state(
    kingdom: Kingdom,
    kingdoms: Sequence[Kingdom],
    turn: int,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> GameStateAnalysis:
    settings = rules.coordinator
    networth = kingdom.networth
    rivals = [other for other in kingdoms if other.id != kingdom.id]
    threats = [other for other in rivals if other.networth > networth * settings.threat_ratio]
    opportunities = [
        other
        for other in rivals
        if networth * settings.opportunity_min_ratio
        <= other.networth
        < networth * settings.opportunity_max_ratio
    ]
    rank = 1 + sum(1 for other in rivals if other.networth > networth)
    position = classify_position(rank, len(rivals) + 1, rules=rules)
    market = classify_market(len(threats), len(opportunities))
    return GameStateAnalysis(
        phase=strategy.game_phase(turn, rules=rules),
        threats=threats,
        opportunities=opportunities,
        rank=rank,
        position=position,
        market=market,
        recommendation=strategic_recommendation(
            position, market, len(threats), len(opportunities)
        ),
    )


def decision_confidence(
    action: StrategicDecision,
    primary_target: TargetAnalysis | None,
    analysis: GameStateAnalysis,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    settings = rules.coordinator
    confidence = settings.base_confidence
    if action.priority >= 8:
        confidence += 0.2
    if action.allocation is not None and action.allocation.risk_level is RiskLevel.LOW:
        confidence += 0.1
    if primary_target is not None:
        if primary_target.recommendation is Recommendation.PRIME:
            confidence += 0.2
        elif primary_target.recommendation is Recommendation.GOOD:
            confidence += 0.1
    if analysis.position is Position.DOMINANT:
        confidence += 0.1
    elif analysis.position is Position.CRITICAL:
        confidence -= 0.2
    if analysis.market is MarketCondition.FAVORABLE:
        confidence += 0.1
    elif analysis.market is MarketCondition.HOSTILE:
        confidence -= 0.1
    return max(settings.min_confidence, min(settings.max_confidence, confidence))


def _reasoning(
    analysis: GameStateAnalysis,
    action: StrategicDecision,
    order: BuildOrder,
    plan: AttackPlan | None,
) -> list[str]:
    trail = [
        f"Game analysis: {analysis.phase.value} phase with {len(analysis.threats)} threats "
        f"and {len(analysis.opportunities)} opportunities",
        f"Primary action: {action.action.value} (priority {action.priority}) - "
        + "; ".join(action.reasoning),
    ]
    if order.steps:
        first = order.steps[0]
        trail.append(
            f"Build priority: {first.description} ({first.expected_benefit} expected benefit)"
        )
    if plan is not None:
        trail.append(
            f"Attack strategy: {len(plan.steps)} planned attacks for "
            f"{plan.expected_land} total land gain"
        )
    trail.append(
        f"Strategic position: {analysis.position.value} player in "
        f"{analysis.market.value} conditions"
    )
    return trail


def _advice(
    analysis: GameStateAnalysis,
    action: StrategicDecision,
    order: BuildOrder,
    plan: AttackPlan | None,
    resource_plan: ResourcePlan,
) -> list[str]:
    advice = [
        f"Game phase: {analysis.phase.value} - {analysis.recommendation}",
        f"Position: {analysis.position.value} in {analysis.market.value} market",
    ]
    if analysis.threats:
        defensive = resource_plan.gold["defensive"].percentage
        advice.append(
            f"{len(analysis.threats)} threats detected - maintain {defensive}% defensive spending"
        )
    if analysis.opportunities:
        advice.append(f"{len(analysis.opportunities)} expansion opportunities available")
    if action.action is ActionType.ATTACK and plan is not None:
        advice.append(f"Attack plan: {plan.total_turns} turns for {plan.expected_land} land")
    elif action.action is ActionType.BUILD:
        focus = order.steps[0].description if order.steps else "Infrastructure development"
        advice.append(f"Build focus: {focus}")
    if any(risk.severity is RiskLevel.HIGH for risk in resource_plan.risks):
        advice.append("High-risk situation detected - emergency reserves activated")
    return advice


class Coordinator:
    """Runs every subsystem for one kingdom and remembers recent decisions."""

    def __init__(self, *, rules: RulesConfig = DEFAULT_RULES) -> None:
        self._rules = rules
        self._history: deque[ComprehensiveDecision] = deque(
            maxlen=rules.coordinator.history_limit
        )

    @property
    def history(self) -> list[ComprehensiveDecision]:
        return list(self._history)

    def action_distribution(self) -> dict[ActionType, int]:
        return dict(Counter(decision.primary_action.action for decision in self._history))

    def decide(
        self,
        kingdom: Kingdom,
        kingdoms: Sequence[Kingdom],
        personality: Personality,
        *,
        turn: int,
        attack_counts: Mapping[KingdomID, int] | None = None,
        protected: frozenset[KingdomID] = frozenset(),
    ) -> ComprehensiveDecision:
        rules = self._rules
        counts = dict(attack_counts or {})
        analysis = analyze_game_state(kingdom, kingdoms, turn, rules=rules)
        rivals = [other for other in kingdoms if other.id != kingdom.id]

        action = strategy.make_decision(
            strategy.StrategyContext(
                kingdom=kingdom,
                personality=personality,
                rivals=rivals,
                phase=analysis.phase,
                attack_counts=counts,
                protected=protected,
                rules=rules,
            )
        )

        resource_plan = resources.create_plan(
            kingdom, analysis.phase, len(analysis.threats), len(analysis.opportunities)
        )
        order = build_order.adapt(
            build_order.optimal_build_order(kingdom.race, analysis.phase, kingdom.resources),
            len(analysis.threats),
            len(analysis.opportunities),
            resource_plan.resource_pressure,
        )

        analyses = targeting.analyze_targets(
            kingdom,
            rivals,
            turn=turn,
            attack_counts=counts,
            protected=protected,
            rules=rules,
        )
        plan = targeting.create_attack_plan(
            kingdom,
            analyses,
            kingdom.resources.turns,
            {other.id: other for other in rivals},
            rules=rules,
        )
        primary = None
        if plan is not None:
            primary = next(a for a in analyses if a.target_id == plan.primary_target_id)

        decision = ComprehensiveDecision(
            kingdom_id=kingdom.id,
            turn=turn,
            primary_action=action,
            analysis=analysis,
            build_order=order,
            target_analyses=analyses,
            attack_plan=plan,
            resource_plan=resource_plan,
            confidence=decision_confidence(action, primary, analysis, rules=rules),
            reasoning=_reasoning(analysis, action, order, plan),
            advice=_advice(analysis, action, order, plan, resource_plan),
        )
        self._history.append(decision)
        logger.debug(
            "%s turn %d: %s (priority %d, confidence %.2f)",
            kingdom.id,
            turn,
            action.action.value,
            action.priority,
            decision.confidence,
        )
        return decision

    def make_decision(self, kingdom: Kingdom, world: World, tick: int) -> ComprehensiveDecision:
        """Decide for ``kingdom`` using the personality, wars and restorations held by ``world``."""

        return self.decide(
            kingdom,
            world.kingdoms(),
            world.personality(kingdom.id, kingdom.race),
            turn=tick,
            attack_counts=world.wars.counts_from(kingdom.id),
            protected=world.protected_ids(),
        )
