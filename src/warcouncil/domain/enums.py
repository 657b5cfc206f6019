"""Enumerations used across the warcouncil domain."""

from __future__ import annotations

from enum import StrEnum


class Race(StrEnum):
    """Playable races. Values match the names used in kingdom snapshots."""

    HUMAN = "Human"
    DROBEN = "Droben"
    SIDHE = "Sidhe"
    ELVEN = "Elven"
    GOBLIN = "Goblin"
    ELEMENTAL = "Elemental"
    VAMPIRE = "Vampire"
    FAE = "Fae"
    CENTAUR = "Centaur"
    DWARVEN = "Dwarven"

    @classmethod
    def parse(cls, value: str | Race | None) -> Race | None:
        """Case-insensitive lookup; returns ``None`` for unknown races."""

        if isinstance(value, Race):
            return value
        if not value:
            return None
        lowered = value.strip().lower()
        for race in cls:
            if race.value.lower() == lowered or race.name.lower() == lowered:
                return race
        return None


class Persona(StrEnum):
    """Character archetype layered on top of the race."""

    # Military
    WARLORD = "warlord"
    TACTICIAN = "tactician"
    BERSERKER = "berserker"
    GUARDIAN = "guardian"
    # Social
    MERCHANT = "merchant"
    NOBLE = "noble"
    PEASANT = "peasant"
    DIPLOMAT = "diplomat"
    # Magic
    ARCHMAGE = "archmage"
    TRICKSTER = "trickster"
    SCHOLAR = "scholar"
    CULTIST = "cultist"
    # Stealth
    ASSASSIN = "assassin"
    SPY = "spy"
    THIEF = "thief"
    SCOUT = "scout"
    # Utility
    BUILDER = "builder"
    EXPLORER = "explorer"
    SURVIVOR = "survivor"
    OPPORTUNIST = "opportunist"


class Playstyle(StrEnum):
    """Strategic temperament layered on top of the persona."""

    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    BALANCED = "balanced"
    OPPORTUNISTIC = "opportunistic"
    CALCULATED = "calculated"
    UNPREDICTABLE = "unpredictable"
    PATIENT = "patient"
    RECKLESS = "reckless"
    DIPLOMATIC = "diplomatic"
    ISOLATIONIST = "isolationist"
    EXPANSIONIST = "expansionist"
    TURTLE = "turtle"


class CombatOutcome(StrEnum):
    """Three-tier combat classification."""

    WITH_EASE = "with_ease"
    GOOD_FIGHT = "good_fight"
    FAILED = "failed"


class AttackType(StrEnum):
    """Attack variants accepted by the combat boundary."""

    CONTROLLED_STRIKE = "controlled_strike"
    AMBUSH = "ambush"
    GUERILLA_RAID = "guerilla_raid"
    MOB_ASSAULT = "mob_assault"
    FULL_ATTACK = "full_attack"


class TerrainType(StrEnum):
    """Battlefield terrain."""

    PLAINS = "plains"
    FOREST = "forest"
    MOUNTAINS = "mountains"
    SWAMP = "swamp"
    DESERT = "desert"
    COASTAL = "coastal"


class FormationType(StrEnum):
    """Named battle formations."""

    DEFENSIVE_WALL = "defensive_wall"
    CAVALRY_CHARGE = "cavalry_charge"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"
    FLANKING = "flanking"
    SIEGE = "siege"
    STANDARD = "standard"


class UnitClass(StrEnum):
    """Unit classes that terrain can favour or penalise."""

    CAVALRY = "cavalry"
    INFANTRY = "infantry"
    SIEGE = "siege"
    OTHER = "other"


class Spell(StrEnum):
    """Castable spells."""

    ROUSING_WIND = "ROUSING_WIND"
    SHATTERING_CALM = "SHATTERING_CALM"
    HURRICANE = "HURRICANE"
    LIGHTNING_LANCE = "LIGHTNING_LANCE"
    BANSHEE_DELUGE = "BANSHEE_DELUGE"
    FOUL_LIGHT = "FOUL_LIGHT"

    @classmethod
    def parse(cls, value: str | Spell | None) -> Spell | None:
        if isinstance(value, Spell):
            return value
        if not value:
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class ScumType(StrEnum):
    GREEN = "green"
    ELITE = "elite"


class ScumOperation(StrEnum):
    """Espionage operations."""

    SCOUT = "scout"
    STEAL = "steal"
    SABOTAGE = "sabotage"
    INTERCEPT = "intercept"
    BURN = "burn"
    DESECRATE = "desecrate"


class RestorationType(StrEnum):
    NONE = "none"
    DAMAGE_BASED = "damage_based"
    DEATH_BASED = "death_based"


class ThreatLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SorceryRole(StrEnum):
    OFFENSIVE_SORCERER = "offensive_sorcerer"
    DEFENSIVE_TARGET = "defensive_target"
    BALANCED = "balanced"


class ActionType(StrEnum):
    """Actions the strategy engine can recommend."""

    BUILD = "build"
    TRAIN = "train"
    ATTACK = "attack"
    DEFEND = "defend"
    WAIT = "wait"


class RiskLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GamePhase(StrEnum):
    EARLY = "early"
    MID = "mid"
    LATE = "late"


class BuildStepType(StrEnum):
    ECONOMIC = "economic"
    MILITARY = "military"
    DEFENSIVE = "defensive"
    EXPANSION = "expansion"


class Recommendation(StrEnum):
    """Target selector buckets, best first."""

    PRIME = "prime"
    GOOD = "good"
    RISKY = "risky"
    AVOID = "avoid"


class PlanStepType(StrEnum):
    CONTROLLED_STRIKE = "controlled_strike"
    FULL_STRIKE = "full_strike"


class Position(StrEnum):
    """Where a kingdom sits in the networth ranking."""

    DOMINANT = "dominant"
    COMPETITIVE = "competitive"
    STRUGGLING = "struggling"
    CRITICAL = "critical"


class MarketCondition(StrEnum):
    FAVORABLE = "favorable"
    NEUTRAL = "neutral"
    HOSTILE = "hostile"


class WarState(StrEnum):
    """Per (attacker, defender) pair war lifecycle."""

    NEUTRAL = "neutral"
    TRACKING = "tracking"
    WAR_REQUIRED = "war_required"
    AT_WAR = "at_war"
