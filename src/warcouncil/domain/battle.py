"""Battle simulation: resolve an attack and apply it to both kingdoms."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from warcouncil.domain.combat import committed_stacks, resolve_combat, tier_stacks
from warcouncil.domain.enums import AttackType
from warcouncil.domain.models import (
    BattleID,
    BattleReport,
    CombatResult,
    Formation,
    Kingdom,
    TerrainModifier,
    UnitStack,
)
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig
from warcouncil.domain.terrain import formation_from_composition, named_formation, terrain_modifier

if TYPE_CHECKING:
    from warcouncil.interfaces.random_source import RandomSource


def resolve_formation(
    formation: Formation | str | None, units: Sequence[UnitStack]
) -> Formation:
    """A named formation wins; otherwise the army's composition decides."""

    if isinstance(formation, Formation):
        return formation
    named = named_formation(formation)
    if named is not None:
        return named
    return formation_from_composition(stack.unit_type for stack in units)


def resolve_terrain(terrain: TerrainModifier | str | None) -> TerrainModifier:
    if isinstance(terrain, TerrainModifier):
        return terrain
    return terrain_modifier(terrain)


def apply_result(
    attacker: Kingdom,
    defender: Kingdom,
    attacker_units: Sequence[UnitStack],
    result: CombatResult,
) -> None:
    """Move casualties, land, gold and structures between the two kingdoms."""

    by_id = {stack.id: stack for stack in attacker_units}
    for stack_id, lost in result.attacker_casualties.items():
        stack = by_id[stack_id]
        remaining = attacker.units.get(stack.unit_type)
        if remaining is not None:
            attacker.units[stack.unit_type] = max(0, remaining - lost)
    for stack_id, lost in result.defender_casualties.items():
        unit_type = stack_id.removeprefix("def-")
        defender.units[unit_type] = max(0, defender.units.get(unit_type, 0) - lost)

    land = min(result.land_gained, defender.resources.land)
    gold = min(result.gold_looted, defender.resources.gold)
    defender.resources.land -= land
    attacker.resources.land += land
    defender.resources.gold -= gold
    attacker.resources.gold += gold
    defender.buildings.structures = max(
        0, defender.buildings.structures - result.structures_destroyed
    )


def simulate_battle(
    attacker: Kingdom,
    defender: Kingdom,
    *,
    attacker_units: Sequence[UnitStack] | None = None,
    formation: Formation | str | None = None,
    terrain: TerrainModifier | str | None = None,
    attack_type: str | AttackType = AttackType.FULL_ATTACK,
    cs_percentage: float | None = None,
    battle_id: BattleID = BattleID(0),
    tick: int = 0,
    rng: RandomSource,
    rules: RulesConfig = DEFAULT_RULES,
) -> BattleReport:
    """Resolve ``attacker`` hitting ``defender`` and mutate both.

    Without explicit ``attacker_units`` the attacker fights with its own
    race-scaled tier army, which is how AI kingdoms attack each other.
    Explicit units are checked against the attacker's holdings.
    """

    if attacker_units is not None:
        units = committed_stacks(attacker, attacker_units, "atk")
    else:
        units = tier_stacks(attacker, "atk")
    resolved_formation = resolve_formation(formation, units)
    resolved_terrain = resolve_terrain(terrain)

    result = resolve_combat(
        units,
        defender,
        formation=resolved_formation,
        terrain=resolved_terrain,
        attack_type=attack_type,
        cs_percentage=cs_percentage,
        attacker_population=attacker.resources.population,
        rng=rng,
        rules=rules,
    )
    apply_result(attacker, defender, units, result)
    return BattleReport(
        id=battle_id,
        tick=tick,
        attacker_id=attacker.id,
        defender_id=defender.id,
        result=result,
        terrain=resolved_terrain.terrain.value,
        formation=resolved_formation.name,
    )
