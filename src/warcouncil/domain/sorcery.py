"""Sorcery rules: temple thresholds, spell damage and elan generation."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from warcouncil.domain import races
from warcouncil.domain.enums import Race, SorceryRole, Spell, ThreatLevel
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpellDefinition:
    tier: int
    elan_cost: int
    primary_effect: str


@dataclass(frozen=True, slots=True)
class SpellEffectiveness:
    """Fractions of the target destroyed by one cast."""

    structures: float = 0.0
    forts: float = 0.0
    backlash: float = 0.0
    kill_rate: float = 0.0


@dataclass(frozen=True, slots=True)
class SpellEffect:
    structure_damage: int = 0
    fort_damage: int = 0
    peasant_kills: int = 0
    backlash_chance: float = 0.0
    elan_cost: int = 0


@dataclass(frozen=True, slots=True)
class ParkingLotStep:
    turn: int
    structures: int
    forts: int
    train_rate: int


@dataclass(frozen=True, slots=True)
class KillStep:
    cast: int
    peasants_remaining: int
    percentage_killed: float


SPELLS: dict[Spell, SpellDefinition] = {
    Spell.ROUSING_WIND: SpellDefinition(1, 1, "shield_removal"),
    Spell.SHATTERING_CALM: SpellDefinition(1, 2, "shield_removal"),
    Spell.HURRICANE: SpellDefinition(2, 3, "structure_fort_damage"),
    Spell.LIGHTNING_LANCE: SpellDefinition(2, 3, "fort_damage_only"),
    Spell.BANSHEE_DELUGE: SpellDefinition(3, 5, "structure_damage_only"),
    Spell.FOUL_LIGHT: SpellDefinition(4, 8, "peasant_killing"),
}

_TIER_TWO_HIGH_BACKLASH: dict[Spell, SpellEffectiveness] = {
    Spell.HURRICANE: SpellEffectiveness(structures=0.0438, forts=0.0625, backlash=0.13),
    Spell.LIGHTNING_LANCE: SpellEffectiveness(forts=0.0875, backlash=0.11),
    Spell.BANSHEE_DELUGE: SpellEffectiveness(structures=0.05, backlash=0.11),
}
_TIER_TWO_LOW_BACKLASH: dict[Spell, SpellEffectiveness] = {
    Spell.HURRICANE: SpellEffectiveness(structures=0.0438, forts=0.0625, backlash=0.10),
    Spell.LIGHTNING_LANCE: SpellEffectiveness(forts=0.0875, backlash=0.08),
    Spell.BANSHEE_DELUGE: SpellEffectiveness(structures=0.05, backlash=0.08),
}

RACIAL_SPELL_EFFECTIVENESS: dict[Race, dict[Spell, SpellEffectiveness]] = {
    Race.SIDHE: {
        Spell.HURRICANE: SpellEffectiveness(structures=0.0563, forts=0.075, backlash=0.09),
        Spell.LIGHTNING_LANCE: SpellEffectiveness(forts=0.10, backlash=0.07),
        Spell.BANSHEE_DELUGE: SpellEffectiveness(structures=0.0625, backlash=0.07),
        Spell.FOUL_LIGHT: SpellEffectiveness(backlash=0.07, kill_rate=0.08),
    },
    Race.ELEMENTAL: _TIER_TWO_HIGH_BACKLASH,
    Race.VAMPIRE: _TIER_TWO_HIGH_BACKLASH,
    Race.ELVEN: _TIER_TWO_LOW_BACKLASH,
    Race.FAE: _TIER_TWO_LOW_BACKLASH,
    Race.HUMAN: {
        Spell.HURRICANE: SpellEffectiveness(structures=0.0313, forts=0.05, backlash=0.11),
        Spell.LIGHTNING_LANCE: SpellEffectiveness(forts=0.075, backlash=0.09),
        Spell.BANSHEE_DELUGE: SpellEffectiveness(structures=0.0375, backlash=0.09),
    },
}

ROLE_TEMPLE_BASE: dict[SorceryRole, float] = {
    SorceryRole.OFFENSIVE_SORCERER: 0.08,
    SorceryRole.DEFENSIVE_TARGET: 0.16,
    SorceryRole.BALANCED: 0.04,
}

THREAT_MULTIPLIERS: dict[ThreatLevel, float] = {
    ThreatLevel.LOW: 1.0,
    ThreatLevel.MEDIUM: 1.5,
    ThreatLevel.HIGH: 2.0,
}


def temple_percentage(temples: int, structures: int) -> float:
    if structures <= 0:
        return 0.0
    return temples / structures


def spell_success(
    caster_temple_pct: float,
    target_temple_pct: float,
    tier: int,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> bool:
    """Whether a cast lands.

    The caster must clear the temple threshold for the spell tier; after
    that the caster's temple share, boosted by the attacker advantage, must
    strictly exceed the target's.
    """

    thresholds = rules.sorcery.tier_thresholds
    required = thresholds[tier - 1] if 1 <= tier <= len(thresholds) else thresholds[0]
    if caster_temple_pct < required:
        return False
    return caster_temple_pct * rules.sorcery.attacker_advantage > target_temple_pct


def spell_damage(
    spell: str | Spell,
    race: str | Race,
    target_structures: int,
    target_forts: int,
    target_population: int,
) -> SpellEffect:
    """Damage of a single cast. Unknown races or spells have no effect."""

    parsed_spell = Spell.parse(spell)
    parsed_race = Race.parse(race)
    table = RACIAL_SPELL_EFFECTIVENESS.get(parsed_race) if parsed_race else None
    data = table.get(parsed_spell) if table and parsed_spell else None
    if data is None:
        logger.debug("No spell effect for race=%r spell=%r", race, spell)
        return SpellEffect()
    return SpellEffect(
        structure_damage=math.floor(target_structures * data.structures),
        fort_damage=math.floor(target_forts * data.forts),
        peasant_kills=math.floor(target_population * data.kill_rate) if data.kill_rate else 0,
        backlash_chance=data.backlash,
        elan_cost=SPELLS[parsed_spell].elan_cost,
    )


def elan_generation(race: str | Race, temples: int, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    parsed = Race.parse(race)
    if parsed in races.HIGH_MAGIC_RACES:
        rate = rules.sorcery.high_magic_elan_rate
    else:
        rate = rules.sorcery.standard_elan_rate
    return math.ceil(temples * rate)


def parking_lot_progression(
    structures: int,
    forts: int,
    race: str | Race,
    spells: Sequence[str | Spell],
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[ParkingLotStep]:
    """Apply a sequence of casts to a target and track its shrinking base."""

    steps: list[ParkingLotStep] = []
    for turn, spell in enumerate(spells, start=1):
        effect = spell_damage(spell, race, structures, forts, 0)
        structures = max(0, structures - effect.structure_damage)
        forts = max(0, forts - effect.fort_damage)
        steps.append(
            ParkingLotStep(
                turn=turn,
                structures=structures,
                forts=forts,
                train_rate=math.floor(structures * rules.sorcery.train_rate_per_structure),
            )
        )
    return steps


def kill_progression(
    population: int,
    race: str | Race,
    spell: str | Spell = Spell.FOUL_LIGHT,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[KillStep]:
    """Repeat a kill spell until the population is gone or a cast kills nobody."""

    initial = population
    steps: list[KillStep] = []
    cast = 0
    while population > 0 and cast < rules.sorcery.max_kill_casts:
        cast += 1
        killed = min(spell_damage(spell, race, 0, 0, population).peasant_kills, population)
        population -= killed
        steps.append(KillStep(cast, population, (initial - population) / initial * 100))
        if killed == 0:
            break
    return steps


def optimal_temple_percentage(
    role: SorceryRole | str,
    threat: ThreatLevel | str,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    base = ROLE_TEMPLE_BASE[SorceryRole(role)]
    return min(rules.sorcery.max_temple_percentage, base * THREAT_MULTIPLIERS[ThreatLevel(threat)])
