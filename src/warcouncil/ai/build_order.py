"""Race-specific build orders re-weighted by game phase and pressure."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from warcouncil.domain.enums import BuildStepType, GamePhase, Race, RiskLevel
from warcouncil.domain.models import Resources


@dataclass(frozen=True, slots=True)
class BuildStep:
    type: BuildStepType
    priority: float
    gold_cost: int
    turn_cost: int
    expected_benefit: int
    description: str

    @property
    def efficiency(self) -> float:
        return self.expected_benefit / (self.gold_cost + self.turn_cost * 100)


@dataclass(slots=True)
class BuildOrder:
    race: Race
    phase: GamePhase
    steps: list[BuildStep] = field(default_factory=list)

    @property
    def total_cost(self) -> int:
        return sum(step.gold_cost for step in self.steps)

    @property
    def time_to_complete(self) -> int:
        return sum(step.turn_cost for step in self.steps)

    @property
    def expected_networth(self) -> float:
        return sum(
            step.expected_benefit * NETWORTH_WEIGHTS.get(step.type, 0.5) for step in self.steps
        )


@dataclass(frozen=True, slots=True)
class BuildValidation:
    feasible: bool
    issues: list[str]


NETWORTH_WEIGHTS: dict[BuildStepType, float] = {
    BuildStepType.ECONOMIC: 10.0,
    BuildStepType.EXPANSION: 1.0,
}

_E, _M, _D, _X = (
    BuildStepType.ECONOMIC,
    BuildStepType.MILITARY,
    BuildStepType.DEFENSIVE,
    BuildStepType.EXPANSION,
)

BUILD_TEMPLATES: dict[Race, tuple[BuildStep, ...]] = {
    Race.HUMAN: (
        BuildStep(_E, 10, 2000, 2, 500, "Tithe buildings"),
        BuildStep(_E, 9, 1500, 1, 300, "Trade infrastructure"),
        BuildStep(_M, 7, 3000, 2, 800, "Balanced military training"),
        BuildStep(_X, 8, 2500, 3, 1000, "Land expansion for economic base"),
    ),
    Race.DROBEN: (
        BuildStep(_M, 10, 4000, 2, 1200, "Elite training facilities"),
        BuildStep(_M, 9, 3500, 2, 1000, "Advanced siege equipment"),
        BuildStep(_D, 8, 2500, 1, 600, "Fortifications"),
        BuildStep(_X, 7, 3000, 4, 1500, "Aggressive land acquisition"),
    ),
    Race.ELVEN: (
        BuildStep(_M, 10, 3500, 1, 1400, "Superior training"),
        BuildStep(_D, 9, 3000, 2, 900, "Defensive positions"),
        BuildStep(_E, 7, 2000, 2, 400, "Support infrastructure"),
        BuildStep(_X, 6, 2500, 3, 800, "Controlled expansion"),
    ),
    Race.GOBLIN: (
        BuildStep(_M, 10, 2500, 1, 1000, "Fast military buildup"),
        BuildStep(_M, 9, 2000, 1, 800, "Mass unit training"),
        BuildStep(_X, 8, 1500, 2, 1200, "Early land grab"),
        BuildStep(_E, 5, 1000, 1, 200, "Minimal economic support"),
    ),
    Race.VAMPIRE: (
        BuildStep(_M, 10, 5000, 3, 1500, "Elite vampire units"),
        BuildStep(_E, 8, 4000, 2, 800, "Resource generation"),
        BuildStep(_X, 7, 3500, 4, 1800, "High-value land acquisition"),
    ),
}

PHASE_MODIFIERS: dict[GamePhase, dict[BuildStepType, float]] = {
    GamePhase.EARLY: {_E: 1.3, _M: 0.8, _D: 0.7, _X: 1.1},
    GamePhase.MID: {_E: 1.0, _M: 1.2, _D: 1.0, _X: 1.3},
    GamePhase.LATE: {_E: 0.8, _M: 1.4, _D: 1.2, _X: 0.9},
}


def template_for(race: str | Race) -> tuple[Race, tuple[BuildStep, ...]]:
    parsed = Race.parse(race)
    if parsed is None or parsed not in BUILD_TEMPLATES:
        return Race.HUMAN, BUILD_TEMPLATES[Race.HUMAN]
    return parsed, BUILD_TEMPLATES[parsed]


def _ordered(steps: list[BuildStep]) -> list[BuildStep]:
    return sorted(steps, key=lambda step: (-step.priority, -step.efficiency))


def optimal_build_order(race: str | Race, phase: GamePhase, resources: Resources) -> BuildOrder:
    """Affordable template steps, phase-weighted and ordered."""

    resolved, template = template_for(race)
    modifiers = PHASE_MODIFIERS[phase]
    steps = [
        replace(step, priority=step.priority * modifiers.get(step.type, 1.0))
        for step in template
        if step.gold_cost <= resources.gold and step.turn_cost <= resources.turns
    ]
    return BuildOrder(race=resolved, phase=phase, steps=_ordered(steps))


def adapt(
    order: BuildOrder, threats: int, opportunities: int, resource_pressure: RiskLevel
) -> BuildOrder:
    adapted: list[BuildStep] = []
    for step in order.steps:
        priority = step.priority
        if threats > 2 and step.type is BuildStepType.DEFENSIVE:
            priority *= 1.5
        if opportunities > 2 and step.type is BuildStepType.MILITARY:
            priority *= 1.3
        if resource_pressure is RiskLevel.HIGH and step.type is BuildStepType.ECONOMIC:
            priority *= 1.4
        adapted.append(replace(step, priority=priority))
    return BuildOrder(race=order.race, phase=order.phase, steps=_ordered(adapted))


def next_step(
    race: str | Race,
    phase: GamePhase,
    resources: Resources,
    *,
    threats: int = 0,
    opportunities: int = 0,
    resource_pressure: RiskLevel = RiskLevel.LOW,
) -> BuildStep | None:
    order = adapt(
        optimal_build_order(race, phase, resources), threats, opportunities, resource_pressure
    )
    return order.steps[0] if order.steps else None


def validate(order: BuildOrder, resources: Resources) -> BuildValidation:
    """Walk the order spending gold and turns, collecting every shortfall."""

    issues: list[str] = []
    gold, turns = resources.gold, resources.turns
    for step in order.steps:
        if step.gold_cost > gold:
            issues.append(
                f"Insufficient gold for {step.description} (need {step.gold_cost}, have {gold})"
            )
        if step.turn_cost > turns:
            issues.append(
                f"Insufficient turns for {step.description} (need {step.turn_cost}, have {turns})"
            )
        gold -= step.gold_cost
        turns -= step.turn_cost
    return BuildValidation(feasible=not issues, issues=issues)
