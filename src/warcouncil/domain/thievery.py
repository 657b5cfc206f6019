"""Thievery rules: detection, theft and scum attrition."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from warcouncil.domain.enums import Race, ScumOperation, ScumType, ThreatLevel
from warcouncil.domain.races import scum_effectiveness, scum_survival
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig

if TYPE_CHECKING:
    from warcouncil.interfaces.random_source import RandomSource

OPERATION_TURN_COSTS: dict[ScumOperation, int] = {
    ScumOperation.SCOUT: 2,
    ScumOperation.STEAL: 3,
    ScumOperation.SABOTAGE: 3,
    ScumOperation.INTERCEPT: 2,
    ScumOperation.BURN: 4,
    ScumOperation.DESECRATE: 3,
}

OPERATION_RISK: dict[ScumOperation, float] = {
    ScumOperation.SCOUT: 0.5,
    ScumOperation.STEAL: 1.0,
    ScumOperation.SABOTAGE: 1.2,
    ScumOperation.INTERCEPT: 0.8,
    ScumOperation.BURN: 1.5,
    ScumOperation.DESECRATE: 1.0,
}

PROTECTION_RATIOS: dict[ThreatLevel, float] = {
    ThreatLevel.LOW: 0.1,
    ThreatLevel.MEDIUM: 0.4,
    ThreatLevel.HIGH: 0.8,
}

SCUM_TRAINING_COST: dict[Race, float] = {
    Race.CENTAUR: 1.0,
    Race.HUMAN: 1.0,
    Race.VAMPIRE: 1.1,
    Race.SIDHE: 1.2,
    Race.ELVEN: 1.0,
    Race.GOBLIN: 1.25,
    Race.DWARVEN: 1.3,
    Race.DROBEN: 1.3,
    Race.ELEMENTAL: 1.2,
    Race.FAE: 1.1,
}


@dataclass(frozen=True, slots=True)
class TheftOutcome:
    success: bool
    stolen: int
    casualties: int


@dataclass(frozen=True, slots=True)
class ProtectionLevels:
    minimum: int
    recommended: int
    optimal: int


@dataclass(frozen=True, slots=True)
class LayeredDefense:
    scum_percentage: float
    military_percentage: float
    effectiveness: float


@dataclass(frozen=True, slots=True)
class ScumCostEffectiveness:
    protection_value: float
    cost_per_protection: float
    efficiency: float


def detection_rate(
    own_scum: int,
    own_race: str | Race,
    enemy_scum: int,
    enemy_race: str | Race,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    """Chance that ``own_scum`` spots the enemy's operatives."""

    if own_scum < rules.thievery.minimum_scum:
        return 0.0
    own = own_scum * scum_effectiveness(own_race)
    enemy = enemy_scum * scum_effectiveness(enemy_race)
    if own + enemy <= 0:
        return 0.0
    return min(rules.thievery.detection_cap, own / (own + enemy))


def optimal_scum_count(
    enemy_scum: int,
    enemy_race: str | Race,
    own_race: str | Race,
    target_rate: float | None = None,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    target = rules.thievery.optimal_detection if target_rate is None else target_rate
    denominator = scum_effectiveness(own_race) * (1 - target)
    if denominator <= 0:
        return rules.thievery.minimum_scum
    required = enemy_scum * scum_effectiveness(enemy_race) * target / denominator
    return max(rules.thievery.minimum_scum, math.ceil(required))


def theft_outcome(
    attacker_scum: int,
    attacker_race: str | Race,
    defender_scum: int,
    defender_race: str | Race,
    target_cash: int,
    *,
    rng: RandomSource,
    rules: RulesConfig = DEFAULT_RULES,
) -> TheftOutcome:
    thievery = rules.thievery
    detection = detection_rate(
        defender_scum, defender_race, attacker_scum, attacker_race, rules=rules
    )
    if rng.random() > 1 - detection:
        return TheftOutcome(
            False, 0, math.floor(attacker_scum * thievery.failure_casualty_rate)
        )
    stolen = min(thievery.base_theft_amount, math.floor(target_cash * thievery.theft_cash_fraction))
    return TheftOutcome(True, stolen, math.floor(attacker_scum * thievery.success_casualty_rate))


def scum_casualties(
    count: int,
    scum_type: ScumType | str,
    operation: ScumOperation | str,
    race: str | Race,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    thievery = rules.thievery
    if ScumType(scum_type) is ScumType.ELITE:
        base = (thievery.elite_death_min + thievery.elite_death_max) / 2
    else:
        base = (thievery.green_death_min + thievery.green_death_max) / 2
    rate = base / scum_survival(race) * OPERATION_RISK[ScumOperation(operation)]
    return math.floor(count * rate)


def operation_turn_cost(operation: ScumOperation | str) -> int:
    return OPERATION_TURN_COSTS[ScumOperation(operation)]


def protection_levels(
    land: int,
    threat: ThreatLevel | str,
    race: str | Race,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> ProtectionLevels:
    ratio = PROTECTION_RATIOS[ThreatLevel(threat)] / scum_effectiveness(race)
    return ProtectionLevels(
        minimum=max(rules.thievery.minimum_scum, math.floor(land * 0.1)),
        recommended=math.floor(land * ratio),
        optimal=math.floor(land * ratio * rules.thievery.protection_buffer),
    )


def layered_defense(
    land: int, military: int, scum: int, *, rules: RulesConfig = DEFAULT_RULES
) -> LayeredDefense:
    """Score how close the scum/military split is to the size-appropriate mix."""

    total = scum + military
    scum_share = scum / total if total > 0 else 0.0
    if land < rules.thievery.large_kingdom_land:
        effectiveness = max(0.5, 1 - abs(scum_share - 0.5) * 2)
    else:
        # Large kingdoms need low-tier troops guarding their scum.
        effectiveness = max(0.6, 1 - abs(scum_share - 0.4) * 1.5)
    return LayeredDefense(scum_share, 1 - scum_share, effectiveness)


def scum_cost_effectiveness(
    count: int, race: str | Race, training_cost: float, maintenance_cost: float
) -> ScumCostEffectiveness:
    parsed = Race.parse(race)
    if parsed is None:
        return ScumCostEffectiveness(0.0, math.inf, 0.0)
    total_cost = training_cost * SCUM_TRAINING_COST[parsed] + maintenance_cost
    protection = count * scum_effectiveness(parsed) * scum_survival(parsed)
    return ScumCostEffectiveness(
        protection_value=protection,
        cost_per_protection=total_cost / protection if protection > 0 else math.inf,
        efficiency=protection / total_cost if total_cost > 0 else 0.0,
    )
