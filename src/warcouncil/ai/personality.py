"""AI personality synthesis: race + persona + playstyle.

A personality starts from the race's base trait vector, which is multiplied
element-wise by the persona's modifiers and then by the playstyle's. Every
trait is clamped to ``[TRAIT_MIN, TRAIT_MAX]``.

All choices (persona, playstyle, name, title) are drawn from seeds keyed by
kingdom id and race, so generating twice for the same kingdom yields the same
personality. Caching per kingdom is the world's job
(:meth:`warcouncil.services.world.World.personality`).
"""

from __future__ import annotations

import logging
from dataclasses import fields

from warcouncil.domain.enums import Persona, Playstyle, Race
from warcouncil.domain.models import (
    TRAIT_MAX,
    TRAIT_MIN,
    BehaviorProfile,
    KingdomID,
    Personality,
    PersonalityTraits,
)
from warcouncil.utils.rng import random_choice

logger = logging.getLogger(__name__)

RACE_PERSONAS: dict[Race, tuple[Persona, ...]] = {
    Race.HUMAN: (
        Persona.MERCHANT,
        Persona.NOBLE,
        Persona.DIPLOMAT,
        Persona.BUILDER,
        Persona.OPPORTUNIST,
        Persona.EXPLORER,
    ),
    Race.DROBEN: (
        Persona.WARLORD,
        Persona.BERSERKER,
        Persona.TACTICIAN,
        Persona.ASSASSIN,
        Persona.SURVIVOR,
    ),
    Race.SIDHE: (Persona.ARCHMAGE, Persona.TRICKSTER, Persona.SCHOLAR, Persona.CULTIST, Persona.SPY),
    Race.ELVEN: (
        Persona.GUARDIAN,
        Persona.DIPLOMAT,
        Persona.SCHOLAR,
        Persona.BUILDER,
        Persona.SURVIVOR,
    ),
    Race.GOBLIN: (
        Persona.BERSERKER,
        Persona.WARLORD,
        Persona.THIEF,
        Persona.SCOUT,
        Persona.OPPORTUNIST,
    ),
    Race.ELEMENTAL: (
        Persona.TACTICIAN,
        Persona.ARCHMAGE,
        Persona.GUARDIAN,
        Persona.SURVIVOR,
        Persona.SCHOLAR,
    ),
    Race.VAMPIRE: (Persona.CULTIST, Persona.ASSASSIN, Persona.NOBLE, Persona.TRICKSTER, Persona.SPY),
    Race.FAE: (
        Persona.TRICKSTER,
        Persona.DIPLOMAT,
        Persona.SCHOLAR,
        Persona.SPY,
        Persona.OPPORTUNIST,
    ),
    Race.CENTAUR: (Persona.SCOUT, Persona.SPY, Persona.EXPLORER, Persona.GUARDIAN, Persona.SURVIVOR),
    Race.DWARVEN: (
        Persona.GUARDIAN,
        Persona.BUILDER,
        Persona.TACTICIAN,
        Persona.MERCHANT,
        Persona.SURVIVOR,
    ),
}

RACE_PLAYSTYLES: dict[Race, tuple[Playstyle, ...]] = {
    Race.HUMAN: (
        Playstyle.BALANCED,
        Playstyle.DIPLOMATIC,
        Playstyle.OPPORTUNISTIC,
        Playstyle.CALCULATED,
        Playstyle.EXPANSIONIST,
    ),
    Race.DROBEN: (
        Playstyle.AGGRESSIVE,
        Playstyle.RECKLESS,
        Playstyle.CALCULATED,
        Playstyle.EXPANSIONIST,
    ),
    Race.SIDHE: (
        Playstyle.PATIENT,
        Playstyle.CALCULATED,
        Playstyle.UNPREDICTABLE,
        Playstyle.ISOLATIONIST,
    ),
    Race.ELVEN: (Playstyle.DEFENSIVE, Playstyle.PATIENT, Playstyle.DIPLOMATIC, Playstyle.TURTLE),
    Race.GOBLIN: (
        Playstyle.AGGRESSIVE,
        Playstyle.RECKLESS,
        Playstyle.OPPORTUNISTIC,
        Playstyle.EXPANSIONIST,
    ),
    Race.ELEMENTAL: (
        Playstyle.BALANCED,
        Playstyle.CALCULATED,
        Playstyle.PATIENT,
        Playstyle.DEFENSIVE,
    ),
    Race.VAMPIRE: (
        Playstyle.PATIENT,
        Playstyle.CALCULATED,
        Playstyle.ISOLATIONIST,
        Playstyle.OPPORTUNISTIC,
    ),
    Race.FAE: (
        Playstyle.UNPREDICTABLE,
        Playstyle.OPPORTUNISTIC,
        Playstyle.DIPLOMATIC,
        Playstyle.BALANCED,
    ),
    Race.CENTAUR: (
        Playstyle.PATIENT,
        Playstyle.CALCULATED,
        Playstyle.DEFENSIVE,
        Playstyle.ISOLATIONIST,
    ),
    Race.DWARVEN: (Playstyle.DEFENSIVE, Playstyle.TURTLE, Playstyle.PATIENT, Playstyle.CALCULATED),
}

# aggression, economy, magic, diplomacy, risk, patience, adaptability, loyalty
RACE_BASE_TRAITS: dict[Race, PersonalityTraits] = {
    Race.HUMAN: PersonalityTraits(1.0, 1.3, 0.8, 1.2, 1.0, 1.1, 1.3, 1.1),
    Race.DROBEN: PersonalityTraits(1.6, 0.7, 0.6, 0.8, 1.4, 0.8, 1.0, 1.2),
    Race.SIDHE: PersonalityTraits(0.8, 0.9, 1.7, 1.0, 1.1, 1.4, 1.2, 0.9),
    Race.ELVEN: PersonalityTraits(0.7, 1.0, 1.2, 1.3, 0.8, 1.3, 1.0, 1.4),
    Race.GOBLIN: PersonalityTraits(1.5, 0.8, 0.6, 0.7, 1.5, 0.7, 1.1, 0.8),
    Race.ELEMENTAL: PersonalityTraits(1.2, 1.0, 1.3, 0.9, 1.0, 1.2, 1.3, 1.0),
    Race.VAMPIRE: PersonalityTraits(1.1, 0.6, 1.4, 0.8, 1.3, 1.5, 1.1, 0.7),
    Race.FAE: PersonalityTraits(1.0, 1.1, 1.3, 1.1, 1.2, 1.0, 1.4, 1.0),
    Race.CENTAUR: PersonalityTraits(0.8, 0.9, 0.7, 1.0, 0.9, 1.3, 1.2, 1.1),
    Race.DWARVEN: PersonalityTraits(0.9, 1.1, 0.6, 1.0, 0.7, 1.4, 0.9, 1.5),
}

PERSONA_MODIFIERS: dict[Persona, dict[str, float]] = {
    Persona.WARLORD: {"aggression": 1.4, "risk": 1.2, "patience": 0.8, "loyalty": 1.3},
    Persona.TACTICIAN: {"aggression": 1.1, "risk": 0.8, "patience": 1.3, "adaptability": 1.2},
    Persona.BERSERKER: {"aggression": 1.8, "risk": 1.6, "patience": 0.5, "adaptability": 0.7},
    Persona.GUARDIAN: {"aggression": 0.6, "risk": 0.7, "patience": 1.4, "loyalty": 1.5},
    Persona.MERCHANT: {"economy": 1.4, "diplomacy": 1.3, "risk": 0.9, "adaptability": 1.2},
    Persona.NOBLE: {"diplomacy": 1.4, "economy": 1.2, "loyalty": 1.2, "patience": 1.1},
    Persona.PEASANT: {"economy": 1.1, "risk": 0.8, "patience": 1.2, "loyalty": 1.3},
    Persona.DIPLOMAT: {"diplomacy": 2.0, "aggression": 0.4, "patience": 1.5, "adaptability": 1.2},
    Persona.ARCHMAGE: {"magic": 1.6, "patience": 1.4, "risk": 0.9, "adaptability": 1.1},
    Persona.TRICKSTER: {"magic": 1.3, "risk": 1.4, "adaptability": 1.5, "loyalty": 0.8},
    Persona.SCHOLAR: {"magic": 1.2, "patience": 1.5, "risk": 0.7, "adaptability": 1.1},
    Persona.CULTIST: {"magic": 1.4, "risk": 1.3, "loyalty": 0.6, "patience": 1.2},
    Persona.ASSASSIN: {"aggression": 1.3, "risk": 1.2, "patience": 1.2, "loyalty": 0.8},
    Persona.SPY: {"risk": 1.1, "patience": 1.4, "adaptability": 1.3, "loyalty": 0.9},
    Persona.THIEF: {"risk": 1.3, "adaptability": 1.2, "loyalty": 0.7, "economy": 1.1},
    Persona.SCOUT: {"risk": 1.0, "patience": 1.2, "adaptability": 1.3, "loyalty": 1.1},
    Persona.BUILDER: {"economy": 1.3, "patience": 1.4, "risk": 0.8, "loyalty": 1.2},
    Persona.EXPLORER: {"risk": 1.2, "adaptability": 1.4, "patience": 0.9, "loyalty": 1.0},
    Persona.SURVIVOR: {"risk": 0.6, "patience": 1.3, "adaptability": 1.2, "loyalty": 1.1},
    Persona.OPPORTUNIST: {"risk": 1.3, "adaptability": 1.4, "loyalty": 0.8, "patience": 0.9},
}

PLAYSTYLE_MODIFIERS: dict[Playstyle, dict[str, float]] = {
    Playstyle.AGGRESSIVE: {"aggression": 1.3, "risk": 1.2, "patience": 0.8},
    Playstyle.DEFENSIVE: {"aggression": 0.7, "risk": 0.8, "patience": 1.3},
    Playstyle.BALANCED: {"adaptability": 1.2, "loyalty": 1.1},
    Playstyle.OPPORTUNISTIC: {"risk": 1.2, "adaptability": 1.3, "loyalty": 0.9},
    Playstyle.CALCULATED: {"risk": 0.8, "patience": 1.3, "adaptability": 1.1},
    Playstyle.UNPREDICTABLE: {"risk": 1.4, "adaptability": 1.4, "loyalty": 0.8},
    Playstyle.PATIENT: {"patience": 1.5, "risk": 0.8, "aggression": 0.8},
    Playstyle.RECKLESS: {"risk": 1.6, "patience": 0.6, "aggression": 1.3},
    Playstyle.DIPLOMATIC: {"diplomacy": 1.4, "aggression": 0.8, "loyalty": 1.2},
    Playstyle.ISOLATIONIST: {"diplomacy": 0.6, "loyalty": 0.7, "patience": 1.2},
    Playstyle.EXPANSIONIST: {"aggression": 1.2, "risk": 1.1, "economy": 1.1},
    Playstyle.TURTLE: {"aggression": 0.6, "risk": 0.7, "patience": 1.4},
}

NAME_POOLS: dict[Race, tuple[str, ...]] = {
    Race.HUMAN: ("Marcus", "Elena", "Thomas", "Isabella", "William", "Catherine"),
    Race.DROBEN: ("Grimjaw", "Bloodfang", "Ironhide", "Skullcrusher", "Darkbane"),
    Race.SIDHE: ("Silvermoon", "Starweaver", "Moonwhisper", "Dawnbringer", "Nightfall"),
    Race.ELVEN: ("Aelindra", "Thalorin", "Silvanus", "Elenion", "Galadwen"),
    Race.GOBLIN: ("Snaggletooth", "Rustblade", "Quickstab", "Grimbolt", "Sneakfang"),
}

TITLE_POOLS: dict[Persona, tuple[str, ...]] = {
    Persona.WARLORD: ("the Conqueror", "the Destroyer", "the Warlord"),
    Persona.MERCHANT: ("the Wealthy", "the Trader", "the Merchant Prince"),
    Persona.ARCHMAGE: ("the Wise", "the Arcane", "the Spellweaver"),
}
DEFAULT_TITLES: tuple[str, ...] = ("the Bold",)


def _resolve_race(race: str | Race) -> Race:
    parsed = Race.parse(race)
    if parsed is None:
        logger.warning("Unknown race %r, falling back to Human personality tables", race)
        return Race.HUMAN
    return parsed


def combine_traits(race: Race, persona: Persona, playstyle: Playstyle) -> PersonalityTraits:
    base = RACE_BASE_TRAITS[race]
    combined = PersonalityTraits(*base.as_tuple())
    for modifiers in (PERSONA_MODIFIERS[persona], PLAYSTYLE_MODIFIERS[playstyle]):
        for trait, factor in modifiers.items():
            setattr(combined, trait, getattr(combined, trait) * factor)
    for entry in fields(combined):
        value = getattr(combined, entry.name)
        setattr(combined, entry.name, max(TRAIT_MIN, min(TRAIT_MAX, value)))
    return combined


def _alliance_strategy(traits: PersonalityTraits) -> str:
    if traits.diplomacy > 1.3 and traits.loyalty > 1.2:
        return "loyal_ally"
    if traits.diplomacy > 1.2:
        return "active_diplomat"
    if traits.loyalty < 0.8:
        return "opportunistic_betrayer"
    return "neutral"


def _economic_strategy(traits: PersonalityTraits) -> str:
    if traits.economy > 1.3 and traits.risk < 0.9:
        return "conservative_growth"
    if traits.economy > 1.2:
        return "economic_focus"
    if traits.risk > 1.3:
        return "high_risk_high_reward"
    return "balanced_economy"


def _military_strategy(traits: PersonalityTraits) -> str:
    if traits.aggression > 1.4 and traits.patience < 0.8:
        return "blitz_warfare"
    if traits.aggression > 1.2:
        return "aggressive_expansion"
    if traits.patience > 1.3:
        return "calculated_strikes"
    return "defensive_military"


_ENDGAME: dict[Persona, str] = {
    Persona.WARLORD: "military_domination",
    Persona.MERCHANT: "economic_victory",
    Persona.ARCHMAGE: "magical_supremacy",
}

_PREFERRED_TARGETS: dict[Persona, list[str]] = {
    Persona.BERSERKER: ["weak", "isolated"],
    Persona.OPPORTUNIST: ["distracted", "weakened"],
    Persona.TACTICIAN: ["strategic", "valuable"],
}


def _avoided_targets(persona: Persona, playstyle: Playstyle) -> list[str]:
    if playstyle is Playstyle.DEFENSIVE:
        return ["strong", "allied"]
    if persona is Persona.DIPLOMAT:
        return ["allied", "friendly"]
    return ["overwhelming"]


def _quirks(race: Race, persona: Persona, playstyle: Playstyle) -> list[str]:
    quirks: list[str] = []
    if race is Race.DROBEN and persona is Persona.BERSERKER:
        quirks += ["attacks_when_wounded", "ignores_weak_targets"]
    if persona is Persona.TRICKSTER:
        quirks += ["unpredictable_alliances", "surprise_attacks"]
    if playstyle is Playstyle.TURTLE and persona is Persona.GUARDIAN:
        quirks += ["extreme_defensive", "alliance_protector"]
    return quirks


def build_behavior(
    race: Race, persona: Persona, playstyle: Playstyle, traits: PersonalityTraits
) -> BehaviorProfile:
    return BehaviorProfile(
        preferred_targets=list(_PREFERRED_TARGETS.get(persona, ["suitable"])),
        avoided_targets=_avoided_targets(persona, playstyle),
        alliance_strategy=_alliance_strategy(traits),
        economic_strategy=_economic_strategy(traits),
        military_strategy=_military_strategy(traits),
        endgame_strategy=_ENDGAME.get(persona, "balanced_victory"),
        quirks=_quirks(race, persona, playstyle),
    )


def _seed(prefix: str, kingdom_id: KingdomID, race: Race, what: str) -> str:
    return f"{prefix}:{kingdom_id}:{race.value}:{what}"


def create_specific(
    kingdom_id: KingdomID,
    race: str | Race,
    persona: Persona | str,
    playstyle: Playstyle | str,
    *,
    seed_prefix: str = "personality",
) -> Personality:
    """Build the personality for an explicit persona/playstyle combination."""

    resolved = _resolve_race(race)
    persona = Persona(persona)
    playstyle = Playstyle(playstyle)
    traits = combine_traits(resolved, persona, playstyle)
    names = NAME_POOLS.get(resolved, NAME_POOLS[Race.HUMAN])
    titles = TITLE_POOLS.get(persona, DEFAULT_TITLES)
    name = random_choice(_seed(seed_prefix, kingdom_id, resolved, "name"), names)["choice"]
    title = random_choice(_seed(seed_prefix, kingdom_id, resolved, "title"), titles)["choice"]
    return Personality(
        kingdom_id=kingdom_id,
        race=resolved.value,
        persona=persona,
        playstyle=playstyle,
        name=name,
        title=title,
        description=(
            f"A {playstyle.value} {resolved.value} {persona.value} known for "
            f"{persona.value} tactics and {playstyle.value} approach"
        ),
        traits=traits,
        behavior=build_behavior(resolved, persona, playstyle, traits),
    )


def generate(
    kingdom_id: KingdomID, race: str | Race, *, seed_prefix: str = "personality"
) -> Personality:
    """Draw a persona and playstyle from the race's pools and build the personality."""

    resolved = _resolve_race(race)
    persona = random_choice(
        _seed(seed_prefix, kingdom_id, resolved, "persona"), RACE_PERSONAS[resolved]
    )["choice"]
    playstyle = random_choice(
        _seed(seed_prefix, kingdom_id, resolved, "playstyle"), RACE_PLAYSTYLES[resolved]
    )["choice"]
    return create_specific(kingdom_id, resolved, persona, playstyle, seed_prefix=seed_prefix)
