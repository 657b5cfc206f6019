"""Gold and turn budgeting for one kingdom."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from warcouncil.domain.enums import GamePhase, RiskLevel
from warcouncil.domain.models import Kingdom
from warcouncil.domain.races import resource_bonus

GOLD_BUCKETS: tuple[str, ...] = ("economic", "military", "defensive", "emergency", "opportunity")

PHASE_GOLD_ALLOCATION: dict[GamePhase, dict[str, int]] = {
    GamePhase.EARLY: {"economic": 45, "military": 25, "defensive": 15, "emergency": 10, "opportunity": 5},
    GamePhase.MID: {"economic": 30, "military": 35, "defensive": 20, "emergency": 10, "opportunity": 5},
    GamePhase.LATE: {"economic": 20, "military": 45, "defensive": 20, "emergency": 10, "opportunity": 5},
}


@dataclass(frozen=True, slots=True)
class GoldShare:
    amount: int
    percentage: int


@dataclass(frozen=True, slots=True)
class TurnAllocation:
    attacks: int
    building: int
    defense: int
    scouting: int
    reserve: int


@dataclass(frozen=True, slots=True)
class Risk:
    type: str
    severity: RiskLevel
    description: str


@dataclass(frozen=True, slots=True)
class EmergencyReserves:
    gold: int
    turns: int


@dataclass(slots=True)
class ResourcePlan:
    gold: dict[str, GoldShare] = field(default_factory=dict)
    turns: TurnAllocation = field(default_factory=lambda: TurnAllocation(0, 0, 0, 0, 0))
    reserves: EmergencyReserves = field(default_factory=lambda: EmergencyReserves(0, 0))
    risks: list[Risk] = field(default_factory=list)

    @property
    def resource_pressure(self) -> RiskLevel:
        if any(risk.type == "economic" for risk in self.risks):
            return RiskLevel.HIGH
        if self.risks:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW


def gold_percentages(race: str, phase: GamePhase, threats: int, opportunities: int) -> dict[str, int]:
    allocation = dict(PHASE_GOLD_ALLOCATION[phase])
    if threats > 2:
        allocation["defensive"] += 10
        allocation["military"] += 5
        allocation["economic"] -= 10
        allocation["opportunity"] -= 5
    if opportunities > 2:
        allocation["military"] += 10
        allocation["opportunity"] += 5
        allocation["economic"] -= 10
        allocation["defensive"] -= 5

    bonus = resource_bonus(race)
    if bonus.economy > 0:
        allocation["economic"] += 5
        allocation["military"] -= 5
    if bonus.military > 0:
        allocation["military"] += 5
        allocation["economic"] -= 5
    return allocation


def allocate_gold(
    kingdom: Kingdom, phase: GamePhase, threats: int, opportunities: int
) -> dict[str, GoldShare]:
    gold = kingdom.resources.gold
    percentages = gold_percentages(kingdom.race, phase, threats, opportunities)
    return {
        bucket: GoldShare(amount=math.floor(gold * pct / 100), percentage=pct)
        for bucket, pct in percentages.items()
    }


def allocate_turns(turns: int, threats: int, opportunities: int) -> TurnAllocation:
    """Split available turns; defense never eats into turns already handed out."""

    attacks = min(math.floor(turns * 0.6), opportunities * 4)
    building = math.floor(turns * 0.2)
    scouting = math.floor(turns * 0.05)
    defense = min(
        max(math.floor(turns * 0.1), threats * 2),
        max(turns - attacks - building - scouting, 0),
    )
    return TurnAllocation(
        attacks=attacks,
        building=building,
        defense=defense,
        scouting=scouting,
        reserve=turns - attacks - building - scouting - defense,
    )


def emergency_reserves(kingdom: Kingdom, threats: int) -> EmergencyReserves:
    multiplier = 1 + threats * 0.1
    return EmergencyReserves(
        gold=math.floor(math.floor(kingdom.resources.gold * 0.15) * multiplier),
        turns=math.floor(math.floor(kingdom.resources.turns * 0.1) * multiplier),
    )


def identify_risks(kingdom: Kingdom, threats: int) -> list[Risk]:
    risks: list[Risk] = []
    if threats > 2:
        risks.append(Risk("military", RiskLevel.HIGH, "Multiple hostile kingdoms detected"))
    if kingdom.resources.gold / max(kingdom.resources.land, 1) < 30:
        risks.append(
            Risk("economic", RiskLevel.MEDIUM, "Low gold reserves relative to land holdings")
        )
    if kingdom.resources.turns < 10:
        risks.append(
            Risk("resource", RiskLevel.MEDIUM, "Low turn reserves limit strategic options")
        )
    return risks


def create_plan(kingdom: Kingdom, phase: GamePhase, threats: int, opportunities: int) -> ResourcePlan:
    return ResourcePlan(
        gold=allocate_gold(kingdom, phase, threats, opportunities),
        turns=allocate_turns(kingdom.resources.turns, threats, opportunities),
        reserves=emergency_reserves(kingdom, threats),
        risks=identify_risks(kingdom, threats),
    )
