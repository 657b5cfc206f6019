"""Restoration rules: qualification after catastrophic damage and the protection window."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from warcouncil.domain.enums import RestorationType
from warcouncil.domain.models import Kingdom
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig

ALLOWED_ACTIONS: tuple[str, ...] = (
    "building_construction",
    "encamp_usage",
    "resource_management",
    "guild_communication",
    "internal_affairs",
)

PROHIBITED_ACTIONS: tuple[str, ...] = (
    "combat_attacks",
    "combat_defense",
    "sorcery_casting",
    "sorcery_targeting",
    "espionage_operations",
    "espionage_targeting",
    "diplomatic_actions",
    "alliance_changes",
)


class RestorationActiveError(RuntimeError):
    """Raised when an action targets a kingdom that is under restoration."""


@dataclass(frozen=True, slots=True)
class DamageSnapshot:
    structures: int
    population: int
    critical_buildings: tuple[str, ...] = ()

    @classmethod
    def of(cls, kingdom: Kingdom) -> DamageSnapshot:
        return cls(
            structures=kingdom.buildings.structures,
            population=kingdom.resources.population,
            critical_buildings=tuple(kingdom.buildings.critical),
        )


@dataclass(frozen=True, slots=True)
class DamageAssessment:
    structure_loss: float
    population_loss: float
    critical_destroyed: bool
    restoration_type: RestorationType

    @property
    def qualifies(self) -> bool:
        return self.restoration_type is not RestorationType.NONE


@dataclass(slots=True)
class RestorationStatus:
    type: RestorationType
    start_time: datetime
    end_time: datetime
    remaining_hours: float
    allowed_actions: list[str] = field(default_factory=lambda: list(ALLOWED_ACTIONS))
    prohibited_actions: list[str] = field(default_factory=lambda: list(PROHIBITED_ACTIONS))

    def is_active(self, now: datetime) -> bool:
        return now < self.end_time


def _loss(before: int, after: int) -> float:
    # No holdings before the attack means nothing could be lost.
    if before <= 0:
        return 0.0
    return 1 - after / before


def restoration_qualifies(
    pre: DamageSnapshot, post: DamageSnapshot, *, rules: RulesConfig = DEFAULT_RULES
) -> DamageAssessment:
    """Compare a kingdom before and after an attack."""

    structure_loss = _loss(pre.structures, post.structures)
    population_loss = _loss(pre.population, post.population)
    critical_destroyed = any(
        building not in post.critical_buildings for building in pre.critical_buildings
    )

    if (pre.structures > 0 and post.structures == 0) or (
        pre.population > 0 and post.population == 0
    ):
        kind = RestorationType.DEATH_BASED
    elif (
        structure_loss >= rules.restoration.structure_loss_minimum
        or population_loss >= rules.restoration.population_loss_minimum
        or critical_destroyed
    ):
        kind = RestorationType.DAMAGE_BASED
    else:
        kind = RestorationType.NONE
    return DamageAssessment(structure_loss, population_loss, critical_destroyed, kind)


def restoration_status(
    damage_time: datetime,
    restoration_type: RestorationType | str,
    now: datetime,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> RestorationStatus:
    kind = RestorationType(restoration_type)
    if kind is RestorationType.NONE:
        raise ValueError("restoration_type must be damage_based or death_based")
    hours = (
        rules.restoration.death_based_hours
        if kind is RestorationType.DEATH_BASED
        else rules.restoration.damage_based_hours
    )
    end_time = damage_time + timedelta(hours=hours)
    remaining = max(0.0, (end_time - now).total_seconds() / 3600)
    return RestorationStatus(kind, damage_time, end_time, remaining)


def is_action_allowed(status: RestorationStatus | None, action: str, now: datetime) -> bool:
    if status is None or not status.is_active(now):
        return True
    return action not in status.prohibited_actions


def sorcery_kill_efficiency(
    sorcery_turns: int,
    removal_hours: float,
    alternative_value: float,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> tuple[float, str, list[str]]:
    """Whether spending turns to force a target into restoration beats hitting someone else."""

    if sorcery_turns <= 0:
        raise ValueError("sorcery_turns must be positive")
    kill = removal_hours / sorcery_turns
    alternative = alternative_value / sorcery_turns
    if kill > alternative:
        reasoning = [f"{removal_hours} hours removal worth {sorcery_turns} turn investment"]
        if removal_hours >= rules.restoration.death_based_hours:
            reasoning.append("Complete elimination provides maximum strategic denial")
        return kill, "sorcery_kill", reasoning
    return kill, "alternative_target", [
        f"Alternative target provides {alternative_value} immediate value",
        "Sorcery kill turn investment not justified by removal duration",
    ]