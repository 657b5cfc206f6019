"""Per-race stat tables.

Every table is keyed by :class:`Race`. Lookups go through the helpers at the
bottom of this module so that an unknown race string degrades to the neutral
entry instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from warcouncil.domain.enums import Race

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RaceStats:
    """Relative race strengths on a 1-5 scale."""

    war_offense: int
    war_defense: int
    sorcery: int
    scum: int
    forts: int
    economy: int


@dataclass(frozen=True, slots=True)
class CombatBonus:
    offense: float = 0.0
    defense: float = 0.0


@dataclass(frozen=True, slots=True)
class ResourceBonus:
    economy: float = 0.0
    military: float = 0.0
    defense: float = 0.0


NEUTRAL_STATS = RaceStats(3, 3, 3, 3, 3, 3)

RACE_STATS: dict[Race, RaceStats] = {
    Race.HUMAN: RaceStats(3, 3, 3, 4, 3, 5),
    Race.ELVEN: RaceStats(2, 4, 4, 3, 3, 3),
    Race.GOBLIN: RaceStats(4, 3, 2, 2, 3, 3),
    Race.DROBEN: RaceStats(5, 3, 2, 3, 3, 2),
    Race.VAMPIRE: RaceStats(3, 4, 4, 4, 5, 2),
    Race.ELEMENTAL: RaceStats(4, 3, 4, 2, 4, 3),
    Race.CENTAUR: RaceStats(2, 2, 2, 5, 3, 2),
    Race.SIDHE: RaceStats(2, 3, 5, 4, 4, 3),
    Race.DWARVEN: RaceStats(3, 5, 2, 2, 4, 2),
    Race.FAE: RaceStats(3, 3, 4, 3, 3, 4),
}

COMBAT_BONUSES: dict[Race, CombatBonus] = {
    Race.HUMAN: CombatBonus(0.0, 0.0),
    Race.DROBEN: CombatBonus(0.2, 0.1),
    Race.ELVEN: CombatBonus(-0.1, 0.3),
    Race.GOBLIN: CombatBonus(0.1, -0.2),
    Race.VAMPIRE: CombatBonus(0.3, 0.0),
    Race.ELEMENTAL: CombatBonus(0.1, 0.1),
    Race.CENTAUR: CombatBonus(0.0, 0.1),
    Race.SIDHE: CombatBonus(0.1, 0.2),
    Race.DWARVEN: CombatBonus(0.0, 0.4),
    Race.FAE: CombatBonus(0.15, 0.15),
}

RESOURCE_BONUSES: dict[Race, ResourceBonus] = {
    Race.HUMAN: ResourceBonus(0.2, 0.0, 0.0),
    Race.DROBEN: ResourceBonus(-0.1, 0.3, 0.1),
    Race.ELVEN: ResourceBonus(0.0, 0.1, 0.2),
    Race.GOBLIN: ResourceBonus(-0.1, 0.2, -0.1),
    Race.VAMPIRE: ResourceBonus(-0.2, 0.4, 0.0),
    Race.ELEMENTAL: ResourceBonus(0.1, 0.1, 0.1),
    Race.CENTAUR: ResourceBonus(0.0, 0.0, 0.1),
    Race.SIDHE: ResourceBonus(0.1, 0.2, 0.1),
    Race.DWARVEN: ResourceBonus(0.1, 0.0, 0.3),
    Race.FAE: ResourceBonus(0.15, 0.15, 0.15),
}

# Thievery: strength multiplier and survival divisor.
SCUM_EFFECTIVENESS: dict[Race, float] = {
    Race.CENTAUR: 1.005,
    Race.HUMAN: 1.0,
    Race.VAMPIRE: 1.0,
    Race.SIDHE: 1.0,
    Race.ELVEN: 0.9,
    Race.GOBLIN: 0.8,
    Race.DWARVEN: 0.8,
    Race.DROBEN: 0.75,
    Race.ELEMENTAL: 0.85,
    Race.FAE: 0.95,
}

SCUM_SURVIVAL: dict[Race, float] = {
    Race.VAMPIRE: 1.1,
    Race.GOBLIN: 0.9,
    Race.DWARVEN: 0.9,
    Race.DROBEN: 0.85,
    Race.ELEMENTAL: 0.9,
    Race.FAE: 0.95,
}

FORT_DEFENSE: dict[Race, int] = {
    Race.GOBLIN: 285,
    Race.HUMAN: 250,
    Race.DWARVEN: 300,
}

SUMMON_RATES: dict[Race, float] = {
    Race.DROBEN: 0.0304,
    Race.ELEMENTAL: 0.0284,
    Race.GOBLIN: 0.0275,
    Race.DWARVEN: 0.0275,
    Race.HUMAN: 0.025,
}

HIGH_MAGIC_RACES: frozenset[Race] = frozenset({Race.SIDHE, Race.VAMPIRE})


def stats_for(race: str | Race | None) -> RaceStats:
    parsed = Race.parse(race)
    if parsed is None:
        logger.debug("Unknown race %r, using neutral stats", race)
        return NEUTRAL_STATS
    return RACE_STATS.get(parsed, NEUTRAL_STATS)


def combat_bonus(race: str | Race | None) -> CombatBonus:
    parsed = Race.parse(race)
    return COMBAT_BONUSES.get(parsed, CombatBonus()) if parsed else CombatBonus()


def resource_bonus(race: str | Race | None) -> ResourceBonus:
    parsed = Race.parse(race)
    return RESOURCE_BONUSES.get(parsed, ResourceBonus()) if parsed else ResourceBonus()


def scum_effectiveness(race: str | Race | None) -> float:
    parsed = Race.parse(race)
    return SCUM_EFFECTIVENESS.get(parsed, 1.0) if parsed else 1.0


def scum_survival(race: str | Race | None) -> float:
    parsed = Race.parse(race)
    return SCUM_SURVIVAL.get(parsed, 1.0) if parsed else 1.0
