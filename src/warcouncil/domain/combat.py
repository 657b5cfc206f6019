"""Combat rules: turn costs, outcome bands, casualties and land transfer."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from warcouncil.domain import races
from warcouncil.domain.enums import AttackType, CombatOutcome, Race
from warcouncil.domain.models import (
    TIER_KEYS,
    CombatResult,
    Formation,
    InvalidInputError,
    Kingdom,
    TerrainModifier,
    UnitStack,
)
from warcouncil.domain.rules_config import DEFAULT_RULES, CombatRules, RulesConfig
from warcouncil.domain.terrain import unit_class

if TYPE_CHECKING:
    from warcouncil.interfaces.random_source import RandomSource

# Base (attack, defense) per tier before race scaling.
TIER_BASE_STATS: dict[str, tuple[int, int]] = {
    "tier1": (1, 1),
    "tier2": (2, 3),
    "tier3": (4, 4),
    "tier4": (5, 2),
}

GUERILLA_WARNING = "Guerilla Raid: no land will be taken. Only kills troops and peasants."
MOB_NO_PEASANTS = "Mob Assault requires peasants. You have none to send."
MOB_WARNING = "Mob Assault: your peasants will be at risk. Takes less land than Full Attack."


@dataclass(frozen=True, slots=True)
class AttackValidation:
    valid: bool
    warning: str | None = None


@dataclass(frozen=True, slots=True)
class PlateResult:
    """Outcome of several kingdoms hitting one target in sequence."""

    total_land_gained: int
    turns_required: int
    efficiency: float


def turn_cost(
    attacker_networth: float,
    defender_networth: float,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Turns needed to attack a target.

    A target much smaller *or* much larger than the attacker costs more than a
    fair fight; the asymmetry between 6 and 8 turns is deliberate.
    """

    combat = rules.combat
    ratio = defender_networth / max(1, attacker_networth)
    if ratio < combat.networth_threshold:
        return math.floor(combat.base_turn_cost * combat.easy_target_multiplier)
    if ratio > 1 / combat.networth_threshold:
        return math.floor(combat.base_turn_cost * combat.hard_target_multiplier)
    return combat.base_turn_cost


def requires_war_declaration(attack_count: int, *, rules: RulesConfig = DEFAULT_RULES) -> bool:
    return attack_count >= rules.combat.attacks_before_declaration


def parse_attack_type(value: str | AttackType) -> AttackType:
    try:
        return AttackType(value)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown attack type: {value!r}") from exc


def validate_attack_type(attack_type: str | AttackType, has_peasants: bool) -> AttackValidation:
    kind = parse_attack_type(attack_type)
    if kind is AttackType.GUERILLA_RAID:
        return AttackValidation(True, GUERILLA_WARNING)
    if kind is AttackType.MOB_ASSAULT:
        if not has_peasants:
            return AttackValidation(False, MOB_NO_PEASANTS)
        return AttackValidation(True, MOB_WARNING)
    return AttackValidation(True)


def classify_outcome(offense_ratio: float, *, rules: RulesConfig = DEFAULT_RULES) -> CombatOutcome:
    if offense_ratio >= rules.combat.with_ease_ratio:
        return CombatOutcome.WITH_EASE
    if offense_ratio >= rules.combat.good_fight_ratio:
        return CombatOutcome.GOOD_FIGHT
    return CombatOutcome.FAILED


def casualty_rates(outcome: CombatOutcome, combat: CombatRules) -> tuple[float, float]:
    """Return (attacker, defender) casualty rates for an outcome."""

    rates = {
        CombatOutcome.WITH_EASE: (
            combat.with_ease_attacker_casualties,
            combat.with_ease_defender_casualties,
        ),
        CombatOutcome.GOOD_FIGHT: (
            combat.good_fight_attacker_casualties,
            combat.good_fight_defender_casualties,
        ),
        CombatOutcome.FAILED: (
            combat.failed_attacker_casualties,
            combat.failed_defender_casualties,
        ),
    }
    return rates[outcome]


def fort_defense(race: str, forts: int, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    parsed = Race.parse(race)
    per_fort = races.FORT_DEFENSE.get(parsed) if parsed else None
    return forts * (per_fort or rules.combat.default_fort_defense)


def summon_troops(
    race: str,
    networth: float,
    cash_multiplier: float = 1.0,
    guildhall_bonus: float = 0,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Troops summoned from networth; cash and guildhalls inflate the base."""

    parsed = Race.parse(race)
    rate = races.SUMMON_RATES.get(parsed) if parsed else None
    rate = rate or rules.combat.default_summon_rate
    return math.floor((networth * cash_multiplier + guildhall_bonus) * rate)


def optimal_army_reduction(
    army: int, last_outcome: CombatOutcome, *, rules: RulesConfig = DEFAULT_RULES
) -> int:
    if last_outcome is CombatOutcome.WITH_EASE:
        return math.floor(army * (1 - rules.combat.army_reduction_rate))
    return army


def pass_the_plate(
    warriors: Sequence[tuple[float, int]],
    target_land: int,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> PlateResult:
    """Chain attacks by several allies, each capped by its own land capacity.

    ``warriors`` holds ``(offense, land_capacity)`` pairs; each attacker spends
    one turn.
    """

    remaining = target_land
    turns = 0
    gained = 0
    for _offense, capacity in warriors:
        if remaining <= 0:
            break
        take = min(capacity, math.floor(remaining * rules.combat.with_ease_land_max))
        gained += take
        remaining -= take
        turns += 1
    return PlateResult(gained, turns, gained / turns if turns else 0.0)


def tier_stacks(kingdom: Kingdom, prefix: str) -> list[UnitStack]:
    """Build race-scaled unit stacks from a kingdom's tier counts."""

    stats = races.stats_for(kingdom.race)
    stacks: list[UnitStack] = []
    for key in TIER_KEYS:
        count = int(kingdom.units.get(key, 0))
        if count <= 0:
            continue
        attack, defense = TIER_BASE_STATS[key]
        stacks.append(
            UnitStack(
                id=f"{prefix}-{key}",
                unit_type=key,
                count=count,
                attack=attack * stats.war_offense,
                defense=defense * stats.war_defense,
            )
        )
    return stacks


def committed_stacks(
    kingdom: Kingdom, requested: Sequence[UnitStack], prefix: str = "atk"
) -> list[UnitStack]:
    """Rebuild a requested army from the units ``kingdom`` actually holds.

    Counts are totalled per unit type and checked against the kingdom's
    holdings. Attack and defense always come from the race-scaled tier
    table, whatever the request carried.

    Raises:
        InvalidInputError: for an unknown unit type, a negative count or a
            count larger than the kingdom holds.
    """

    totals: dict[str, int] = {}
    for stack in requested:
        if stack.unit_type not in TIER_BASE_STATS:
            raise InvalidInputError(f"unknown unit type {stack.unit_type!r}")
        if stack.count < 0:
            raise InvalidInputError(f"unit {stack.id} has a negative count")
        totals[stack.unit_type] = totals.get(stack.unit_type, 0) + int(stack.count)

    stats = races.stats_for(kingdom.race)
    stacks: list[UnitStack] = []
    for key in TIER_KEYS:
        count = totals.get(key, 0)
        if count <= 0:
            continue
        held = int(kingdom.units.get(key, 0))
        if count > held:
            raise InvalidInputError(f"Insufficient {key}: requested {count}, have {held}")
        attack, defense = TIER_BASE_STATS[key]
        stacks.append(
            UnitStack(
                id=f"{prefix}-{key}",
                unit_type=key,
                count=count,
                attack=attack * stats.war_offense,
                defense=defense * stats.war_defense,
            )
        )
    return stacks


def _attacker_power(
    stacks: Sequence[UnitStack], terrain: TerrainModifier | None
) -> float:
    if terrain is None:
        return sum(stack.attack * stack.count for stack in stacks)
    return sum(
        stack.attack
        * stack.count
        * (1 + terrain.offense + terrain.class_delta(unit_class(stack.unit_type)))
        for stack in stacks
    )


def _land_gained(
    outcome: CombatOutcome,
    attack_type: AttackType,
    defender_land: int,
    cs_percentage: float,
    rng: RandomSource,
    combat: CombatRules,
) -> int:
    if outcome is CombatOutcome.FAILED or attack_type is AttackType.GUERILLA_RAID:
        return 0
    if attack_type is AttackType.CONTROLLED_STRIKE:
        pct = min(max(cs_percentage, combat.controlled_strike_min), combat.controlled_strike_max)
        return math.floor(defender_land * pct)
    if outcome is CombatOutcome.WITH_EASE:
        pct = rng.uniform(combat.with_ease_land_min, combat.with_ease_land_max)
    else:
        pct = rng.uniform(combat.good_fight_land_min, combat.good_fight_land_max)
    if attack_type is AttackType.MOB_ASSAULT:
        pct *= combat.mob_assault_land_factor
    return math.floor(defender_land * pct)


def _casualties(
    stacks: Sequence[UnitStack], rate: float, combat: CombatRules | None = None
) -> dict[str, int]:
    """Per-stack losses. Passing ``combat`` weights losses down for tougher units."""

    losses: dict[str, int] = {}
    for stack in stacks:
        effective = rate
        if combat is not None:
            effective *= max(
                combat.min_casualty_weight, 1 - stack.defense * combat.defense_casualty_weight
            )
        lost = min(stack.count, max(0, math.floor(stack.count * effective)))
        if lost > 0:
            losses[stack.id] = lost
    return losses


def resolve_combat(
    attacker_units: Sequence[UnitStack],
    defender: Kingdom,
    *,
    formation: Formation | None = None,
    terrain: TerrainModifier | None = None,
    attack_type: str | AttackType = AttackType.FULL_ATTACK,
    cs_percentage: float | None = None,
    attacker_population: int | None = None,
    rng: RandomSource,
    rules: RulesConfig = DEFAULT_RULES,
) -> CombatResult:
    """Resolve one attack against ``defender`` without mutating anything.

    ``attacker_population`` decides whether a mob assault has peasants to
    send; without it the attacking stacks are checked for peasants.

    Raises:
        InvalidInputError: for an unknown attack type, a negative unit count,
            or a mob assault launched without peasants.
    """

    combat = rules.combat
    kind = parse_attack_type(attack_type)
    for stack in attacker_units:
        if stack.count < 0:
            raise InvalidInputError(f"unit {stack.id} has a negative count")

    validation = validate_attack_type(kind, _has_peasants(attacker_units, attacker_population))
    if not validation.valid:
        raise InvalidInputError(validation.warning or "invalid attack type")
    warnings = [validation.warning] if validation.warning else []

    attacker_power = _attacker_power(attacker_units, terrain)
    if formation is not None:
        attacker_power *= 1 + formation.offense
    if defender.ambush_active:
        attacker_power *= 1 - combat.ambush_effectiveness
        warnings.append("Defender ambush negated most of the attacking force.")

    defender_stacks = tier_stacks(defender, "def")
    defender_power = sum(stack.defense * stack.count for stack in defender_stacks)
    defender_power += fort_defense(defender.race, defender.buildings.forts, rules=rules)
    if terrain is not None:
        defender_power *= 1 + terrain.defense

    if defender_power <= 0:
        offense_ratio = combat.zero_defense_ratio
    else:
        offense_ratio = attacker_power / defender_power

    outcome = classify_outcome(offense_ratio, rules=rules)
    attacker_rate, defender_rate = casualty_rates(outcome, combat)
    if formation is not None and formation.defense > 0:
        attacker_rate *= 1 - formation.defense

    land = _land_gained(
        outcome,
        kind,
        defender.resources.land,
        cs_percentage if cs_percentage is not None else combat.controlled_strike_min,
        rng,
        combat,
    )
    land = min(land, defender.resources.land)
    gold = min(land * combat.gold_per_acre, defender.resources.gold)
    structures = min(
        math.floor(land * combat.structures_per_acre), defender.buildings.structures
    )

    return CombatResult(
        outcome=outcome,
        offense_ratio=offense_ratio,
        attacker_casualties=_casualties(attacker_units, attacker_rate, combat),
        defender_casualties=_casualties(defender_stacks, defender_rate),
        land_gained=land,
        gold_looted=gold,
        structures_destroyed=structures,
        attack_type=kind,
        warnings=warnings,
    )


def _has_peasants(attacker_units: Sequence[UnitStack], population: int | None) -> bool:
    if population is not None:
        return population > 0
    return any(
        stack.count > 0 and stack.unit_type in {"peasant", "tier1"} for stack in attacker_units
    )
