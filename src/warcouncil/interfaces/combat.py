"""Combat Service Protocol Interface.

This module defines the contract of the combat-processing boundary: the
piece that validates an attack, resolves it and mutates the kingdoms
involved.
"""

from collections.abc import Sequence
from typing import Protocol

from warcouncil.domain.enums import AttackType
from warcouncil.domain.models import BattleReport, CombatResult, KingdomID, UnitStack


class ICombatService(Protocol):
    """Protocol defining the combat-processing boundary."""

    def attack(
        self,
        attacker_id: KingdomID,
        defender_id: KingdomID,
        *,
        attacker_units: Sequence[UnitStack] | None = None,
        formation_id: str | None = None,
        terrain_id: str | None = None,
        attack_type: str | AttackType = AttackType.FULL_ATTACK,
        cs_percentage: float | None = None,
    ) -> BattleReport:
        """Resolve one attack, apply it to both kingdoms and record it.

        Args:
            attacker_id: Kingdom launching the attack
            defender_id: Kingdom being attacked
            attacker_units: Explicit unit stacks; defaults to the attacker's army
            formation_id: Named formation, or ``None`` for composition bonuses
            terrain_id: Battlefield terrain, or ``None`` for plains
            attack_type: One of the attack types
            cs_percentage: Land fraction for a controlled strike

        Returns:
            The recorded BattleReport
        """
        ...

    def resolve_combat(
        self,
        attacker_id: KingdomID,
        defender_id: KingdomID,
        attacker_units: Sequence[UnitStack] | None = None,
        formation_id: str | None = None,
        terrain_id: str | None = None,
        attack_type: str = "full_attack",
        cs_percentage: float | None = None,
    ) -> CombatResult:
        """Same as :meth:`attack` but returns only the applied CombatResult."""
        ...

    def battle_history(self) -> list[BattleReport]:
        """Return recent battle reports, newest first."""
        ...
