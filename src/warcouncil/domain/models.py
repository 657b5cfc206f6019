"""Dataclasses describing kingdoms, personalities and combat records.

These are plain in-memory types. The rules layer mutates them directly and
the JSON repository serialises them through pydantic's ``TypeAdapter``, so
every field is a type pydantic understands.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import NewType

from .enums import (
    ActionType,
    AttackType,
    CombatOutcome,
    Persona,
    Playstyle,
    Race,
    RiskLevel,
    TerrainType,
    UnitClass,
)

# --- Strongly typed identifiers -------------------------------------------------

KingdomID = NewType("KingdomID", str)
BattleID = NewType("BattleID", int)

TIER_KEYS: tuple[str, ...] = ("tier1", "tier2", "tier3", "tier4")


class InvalidInputError(ValueError):
    """Raised when a kingdom snapshot has missing, NaN or negative fields."""


# --- Kingdom --------------------------------------------------------------------


@dataclass(slots=True)
class Resources:
    gold: int = 0
    land: int = 0
    population: int = 0
    mana: int = 0
    turns: int = 0


@dataclass(slots=True)
class Buildings:
    structures: int = 0
    forts: int = 0
    temples: int = 0
    critical: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Kingdom:
    """Snapshot of one kingdom.

    ``race`` is kept as the raw string supplied by the caller. Rule tables
    are keyed by :class:`Race`; a string that does not parse degrades to the
    neutral/zero entry of each table instead of failing.
    """

    id: KingdomID
    name: str
    race: str
    resources: Resources = field(default_factory=Resources)
    units: dict[str, int] = field(default_factory=dict)
    buildings: Buildings = field(default_factory=Buildings)
    scum: int = 0
    alliances: set[KingdomID] = field(default_factory=set)
    is_ai: bool = True
    ambush_active: bool = False

    @property
    def race_enum(self) -> Race | None:
        return Race.parse(self.race)

    @property
    def networth(self) -> int:
        return self.resources.land * 1000 + self.resources.gold

    @property
    def total_units(self) -> int:
        return sum(self.units.values())


def validate_kingdom(kingdom: Kingdom) -> None:
    """Reject snapshots the engine cannot reason about.

    Raises:
        InvalidInputError: if a resource field is missing, non-numeric, NaN,
            infinite or negative, or a unit count is negative.
    """

    if not kingdom.id:
        raise InvalidInputError("kingdom id is required")
    for entry in fields(Resources):
        value = getattr(kingdom.resources, entry.name, None)
        _check_quantity(f"{kingdom.id}.resources.{entry.name}", value)
    for name in ("structures", "forts", "temples"):
        _check_quantity(f"{kingdom.id}.buildings.{name}", getattr(kingdom.buildings, name, None))
    _check_quantity(f"{kingdom.id}.scum", kingdom.scum)
    for unit_type, count in kingdom.units.items():
        _check_quantity(f"{kingdom.id}.units.{unit_type}", count)


def _check_quantity(label: str, value: object) -> None:
    if value is None:
        raise InvalidInputError(f"{label} is missing")
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidInputError(f"{label} must be numeric, got {type(value).__name__}")
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidInputError(f"{label} must be finite, got {value}")
    if value < 0:
        raise InvalidInputError(f"{label} cannot be negative, got {value}")


# --- Combat ---------------------------------------------------------------------


@dataclass(slots=True)
class UnitStack:
    """A unit instance taking part in a battle. Casualties are keyed by ``id``."""

    id: str
    unit_type: str
    count: int
    attack: float
    defense: float


@dataclass(frozen=True, slots=True)
class Formation:
    """Fractional bonuses (0.25 == +25%) applied by a battle formation."""

    name: str
    offense: float = 0.0
    defense: float = 0.0
    special: str | None = None


@dataclass(frozen=True, slots=True)
class TerrainModifier:
    terrain: TerrainType
    offense: float = 0.0
    defense: float = 0.0
    cavalry: float = 0.0
    infantry: float = 0.0
    siege: float = 0.0

    def class_delta(self, unit_class: UnitClass) -> float:
        if unit_class is UnitClass.CAVALRY:
            return self.cavalry
        if unit_class is UnitClass.INFANTRY:
            return self.infantry
        if unit_class is UnitClass.SIEGE:
            return self.siege
        return 0.0


@dataclass(slots=True)
class CombatResult:
    outcome: CombatOutcome
    offense_ratio: float
    attacker_casualties: dict[str, int] = field(default_factory=dict)
    defender_casualties: dict[str, int] = field(default_factory=dict)
    land_gained: int = 0
    gold_looted: int = 0
    structures_destroyed: int = 0
    attack_type: AttackType = AttackType.FULL_ATTACK
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.outcome is not CombatOutcome.FAILED


@dataclass(slots=True)
class BattleReport:
    id: BattleID
    tick: int
    attacker_id: KingdomID
    defender_id: KingdomID
    result: CombatResult
    terrain: str | None = None
    formation: str | None = None


@dataclass(slots=True)
class WarDeclaration:
    attacker_id: KingdomID
    defender_id: KingdomID
    attack_count: int = 0
    is_active: bool = False
    declared_at_tick: int | None = None


# --- Personality ----------------------------------------------------------------

TRAIT_MIN = 0.3
TRAIT_MAX = 2.5


@dataclass(slots=True)
class PersonalityTraits:
    aggression: float = 1.0
    economy: float = 1.0
    magic: float = 1.0
    diplomacy: float = 1.0
    risk: float = 1.0
    patience: float = 1.0
    adaptability: float = 1.0
    loyalty: float = 1.0

    def as_tuple(self) -> tuple[float, ...]:
        return tuple(getattr(self, entry.name) for entry in fields(self))


@dataclass(frozen=True, slots=True)
class DecisionModifiers:
    attack_threshold: float
    build_priority: float
    military_focus: float
    magic_focus: float
    defensive_focus: float
    alliance_value: float
    trade_frequency: float
    war_declaration_cost: float

    @classmethod
    def from_traits(cls, traits: PersonalityTraits) -> DecisionModifiers:
        return cls(
            attack_threshold=2.0 - traits.aggression,
            build_priority=traits.economy * 10,
            military_focus=traits.aggression * 10,
            magic_focus=traits.magic * 10,
            defensive_focus=(2.0 - traits.risk) * 10,
            alliance_value=traits.diplomacy * 10,
            trade_frequency=traits.diplomacy * traits.economy,
            war_declaration_cost=(2.0 - traits.aggression) * traits.patience,
        )


@dataclass(slots=True)
class BehaviorProfile:
    preferred_targets: list[str] = field(default_factory=list)
    avoided_targets: list[str] = field(default_factory=list)
    alliance_strategy: str = "neutral"
    economic_strategy: str = "balanced_economy"
    military_strategy: str = "defensive_military"
    endgame_strategy: str = "balanced_victory"
    quirks: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Personality:
    """Race + persona + playstyle synthesis for one kingdom.

    Decision modifiers are never stored; :attr:`modifiers` recomputes them
    from the (clamped) traits on every access.
    """

    kingdom_id: KingdomID
    race: str
    persona: Persona
    playstyle: Playstyle
    name: str
    title: str
    description: str
    traits: PersonalityTraits
    behavior: BehaviorProfile = field(default_factory=BehaviorProfile)

    @property
    def modifiers(self) -> DecisionModifiers:
        return DecisionModifiers.from_traits(self.traits)


# --- Decisions ------------------------------------------------------------------


@dataclass(slots=True)
class ResourceAllocation:
    gold_spend: int
    turns_spend: int
    expected_return: float
    risk_level: RiskLevel


@dataclass(slots=True)
class StrategicDecision:
    action: ActionType
    priority: int
    reasoning: list[str] = field(default_factory=list)
    target_id: KingdomID | None = None
    allocation: ResourceAllocation | None = None
    personality_influence: str | None = None
