"""Combat processing service.

Wraps the pure battle simulator with everything a live game needs around
it: input validation, restoration and war-policy checks, battle ids, the
battle-history buffer and restoration assessment after the fact.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from warcouncil.domain.battle import simulate_battle
from warcouncil.domain.combat import committed_stacks, parse_attack_type
from warcouncil.domain.enums import AttackType
from warcouncil.domain.models import (
    BattleReport,
    CombatResult,
    InvalidInputError,
    KingdomID,
    UnitStack,
    validate_kingdom,
)
from warcouncil.domain.restoration import (
    DamageSnapshot,
    RestorationActiveError,
    is_action_allowed,
    restoration_qualifies,
)
from warcouncil.services.world import World

logger = logging.getLogger(__name__)


class CombatService:
    """Resolve attacks between kingdoms registered in one world."""

    def __init__(self, world: World):
        self.world = world

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
        return self.attack(
            attacker_id,
            defender_id,
            attacker_units=attacker_units,
            formation_id=formation_id,
            terrain_id=terrain_id,
            attack_type=attack_type,
            cs_percentage=cs_percentage,
        ).result

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
        """Resolve and apply one attack, returning the recorded report.

        Raises:
            UnknownKingdomError: if either kingdom is not registered.
            InvalidInputError: for self-attacks, bad snapshots or bad units.
            RestorationActiveError: if either side is under restoration.
            WarDeclarationRequired: if the war policy blocks the attack.
        """

        world = self.world
        attacker = world.kingdom(attacker_id)
        defender = world.kingdom(defender_id)
        if attacker_id == defender_id:
            raise InvalidInputError("a kingdom cannot attack itself")
        validate_kingdom(attacker)
        validate_kingdom(defender)
        kind = parse_attack_type(attack_type)

        now = world.now()
        if world.restoration(defender_id) is not None:
            raise RestorationActiveError(f"{defender_id} is under restoration")
        if not is_action_allowed(world.restoration(attacker_id), "combat_attacks", now):
            raise RestorationActiveError(f"{attacker_id} cannot attack during restoration")

        with world.battle_lock:
            units = (
                committed_stacks(attacker, attacker_units, "atk")
                if attacker_units is not None
                else None
            )
            world.wars.check_attack(attacker_id, defender_id)
            before = DamageSnapshot.of(defender)
            report = simulate_battle(
                attacker,
                defender,
                attacker_units=units,
                formation=formation_id,
                terrain=terrain_id,
                attack_type=kind,
                cs_percentage=cs_percentage,
                battle_id=world.next_battle_id(),
                tick=world.tick,
                rng=world.rng,
                rules=world.rules,
            )
            state = world.wars.record_attack(attacker_id, defender_id)
            world.record_battle(report)

        assessment = restoration_qualifies(before, DamageSnapshot.of(defender), rules=world.rules)
        if assessment.qualifies:
            world.begin_restoration(defender_id, assessment.restoration_type)

        logger.info(
            "Battle %d: %s -> %s %s (ratio %.2f, %d land, war state %s)",
            report.id,
            attacker_id,
            defender_id,
            report.result.outcome.value,
            report.result.offense_ratio,
            report.result.land_gained,
            state.value,
        )
        return report

    def battle_history(self) -> list[BattleReport]:
        return self.world.battle_history()
