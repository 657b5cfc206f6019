"""Terrain, formation and unit-class tables used by battle resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from warcouncil.domain.enums import FormationType, TerrainType, UnitClass
from warcouncil.domain.models import Formation, TerrainModifier

logger = logging.getLogger(__name__)

TERRAIN_MODIFIERS: dict[TerrainType, TerrainModifier] = {
    TerrainType.PLAINS: TerrainModifier(TerrainType.PLAINS),
    TerrainType.FOREST: TerrainModifier(TerrainType.FOREST, defense=0.2, cavalry=-0.1),
    TerrainType.MOUNTAINS: TerrainModifier(TerrainType.MOUNTAINS, defense=0.3, siege=-0.2),
    TerrainType.SWAMP: TerrainModifier(
        TerrainType.SWAMP, offense=-0.15, defense=-0.15, cavalry=-0.15, infantry=-0.15
    ),
    TerrainType.DESERT: TerrainModifier(TerrainType.DESERT, cavalry=0.15, infantry=-0.1),
    TerrainType.COASTAL: TerrainModifier(TerrainType.COASTAL),
}

FORMATIONS: dict[FormationType, Formation] = {
    FormationType.DEFENSIVE_WALL: Formation("defensive_wall", offense=-0.1, defense=0.25),
    FormationType.CAVALRY_CHARGE: Formation("cavalry_charge", offense=0.3, defense=-0.15),
    FormationType.BALANCED: Formation("balanced", offense=0.1, defense=0.1),
    FormationType.AGGRESSIVE: Formation("aggressive", offense=0.15),
    FormationType.FLANKING: Formation("flanking", offense=0.1),
    FormationType.SIEGE: Formation("siege", offense=0.2),
    FormationType.STANDARD: Formation("standard"),
}

# Older saves and the UI refer to formations by display name.
FORMATION_ALIASES: dict[str, FormationType] = {
    "defensive": FormationType.DEFENSIVE_WALL,
    "balanced_formation": FormationType.BALANCED,
}

COMPOSITION_DEFENSIVE_BONUS = 0.15
COMPOSITION_MOBILITY_BONUS = 0.20
COMPOSITION_RANGED_BONUS = 0.10


def _normalize(identifier: str) -> str:
    return identifier.strip().lower().replace("-", "_").replace(" ", "_")


def terrain_modifier(terrain_id: str | TerrainType | None) -> TerrainModifier:
    """Return the modifier for ``terrain_id``; unknown ids fight on plains."""

    if terrain_id is None:
        return TERRAIN_MODIFIERS[TerrainType.PLAINS]
    try:
        terrain = TerrainType(_normalize(terrain_id))
    except ValueError:
        logger.debug("Unknown terrain %r, using plains", terrain_id)
        return TERRAIN_MODIFIERS[TerrainType.PLAINS]
    return TERRAIN_MODIFIERS[terrain]


def named_formation(formation_id: str | FormationType | None) -> Formation | None:
    """Look up a named formation. Returns ``None`` when the id is unknown."""

    if not formation_id:
        return None
    key = _normalize(formation_id)
    alias = FORMATION_ALIASES.get(key)
    if alias is not None:
        return FORMATIONS[alias]
    try:
        return FORMATIONS[FormationType(key)]
    except ValueError:
        logger.debug("Unknown formation %r, no modifier applied", formation_id)
        return None


def formation_from_composition(unit_types: Iterable[str]) -> Formation:
    """Derive a formation from the unit types that make up an army."""

    lowered = [unit_type.lower() for unit_type in unit_types]
    defensive = sum(1 for unit in lowered if "knight" in unit or "militia" in unit)
    cavalry = any("cavalry" in unit for unit in lowered)
    ranged = sum(1 for unit in lowered if "archer" in unit or "mage" in unit)

    offense = 0.0
    defense = 0.0
    specials: list[str] = []
    if defensive >= 2:
        defense += COMPOSITION_DEFENSIVE_BONUS
    if cavalry:
        offense += COMPOSITION_MOBILITY_BONUS
        specials.append("mobility")
    if ranged >= 2:
        offense += COMPOSITION_RANGED_BONUS
        specials.append("ranged_advantage")
    return Formation(
        "composition",
        offense=offense,
        defense=defense,
        special=",".join(specials) or None,
    )


def unit_class(unit_type: str) -> UnitClass:
    lowered = unit_type.lower()
    if "cavalry" in lowered or lowered == "tier4":
        return UnitClass.CAVALRY
    if "siege" in lowered or lowered in {"catapult", "ballista"}:
        return UnitClass.SIEGE
    if (
        "infantry" in lowered
        or "soldier" in lowered
        or lowered in {"militia", "knight", "tier1", "tier2", "tier3"}
    ):
        return UnitClass.INFANTRY
    return UnitClass.OTHER
