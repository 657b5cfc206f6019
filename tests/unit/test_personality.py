"""Unit tests for AI personality synthesis."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from warcouncil.ai import personality
from warcouncil.domain.enums import Persona, Playstyle, Race
from warcouncil.domain.models import TRAIT_MAX, TRAIT_MIN, KingdomID


def test_generation_is_deterministic_per_kingdom():
    first = personality.generate(KingdomID("k1"), "Droben")
    second = personality.generate(KingdomID("k1"), "Droben")
    assert first == second


def test_generated_persona_comes_from_race_pool():
    for race in Race:
        result = personality.generate(KingdomID(f"k-{race.value}"), race)
        assert result.persona in personality.RACE_PERSONAS[race]
        assert result.playstyle in personality.RACE_PLAYSTYLES[race]


def test_seed_prefix_changes_the_draw_space():
    draws = {
        (p.persona, p.playstyle, p.name)
        for p in (
            personality.generate(KingdomID("k1"), "Human", seed_prefix=f"game-{n}")
            for n in range(20)
        )
    }
    assert len(draws) > 1


@given(
    race=st.sampled_from(list(Race)),
    persona=st.sampled_from(list(Persona)),
    playstyle=st.sampled_from(list(Playstyle)),
)
def test_traits_always_clamped(race, persona, playstyle):
    traits = personality.combine_traits(race, persona, playstyle)
    assert all(TRAIT_MIN <= value <= TRAIT_MAX for value in traits.as_tuple())


def test_droben_berserker_more_aggressive_than_elven_diplomat():
    berserker = personality.create_specific(KingdomID("d"), "Droben", "berserker", "aggressive")
    diplomat = personality.create_specific(KingdomID("e"), "Elven", "diplomat", "diplomatic")
    assert berserker.traits.aggression > diplomat.traits.aggression
    assert berserker.traits.aggression == TRAIT_MAX
    assert diplomat.traits.aggression == TRAIT_MIN


def test_droben_berserker_outranks_defensive_elven_diplomat():
    berserker = personality.create_specific(KingdomID("d"), "Droben", "berserker", "aggressive")
    diplomat = personality.create_specific(KingdomID("e"), "Elven", "diplomat", "defensive")
    assert diplomat.race == "Elven"
    assert diplomat.playstyle is Playstyle.DEFENSIVE
    assert berserker.traits.aggression > diplomat.traits.aggression
    assert diplomat.traits.aggression == TRAIT_MIN
    assert berserker.modifiers.attack_threshold < diplomat.modifiers.attack_threshold


def test_modifiers_follow_traits():
    result = personality.create_specific(KingdomID("k"), "Human", "merchant", "balanced")
    modifiers = result.modifiers
    assert modifiers.attack_threshold == pytest.approx(2.0 - result.traits.aggression)
    assert modifiers.build_priority == pytest.approx(result.traits.economy * 10)
    assert modifiers.defensive_focus == pytest.approx((2.0 - result.traits.risk) * 10)


def test_modifiers_recompute_after_trait_change():
    result = personality.create_specific(KingdomID("k"), "Human", "merchant", "balanced")
    result.traits.aggression = 2.0
    assert result.modifiers.military_focus == pytest.approx(20.0)


def test_unknown_race_falls_back_to_human():
    result = personality.generate(KingdomID("k"), "Orc")
    assert result.race == "Human"


def test_droben_berserker_quirks():
    result = personality.create_specific(KingdomID("k"), "Droben", "berserker", "reckless")
    assert "attacks_when_wounded" in result.behavior.quirks
    assert result.behavior.military_strategy == "blitz_warfare"
    assert result.behavior.preferred_targets == ["weak", "isolated"]


def test_titles_and_names_come_from_pools():
    result = personality.create_specific(KingdomID("k"), "Human", "warlord", "aggressive")
    assert result.name in personality.NAME_POOLS[Race.HUMAN]
    assert result.title in personality.TITLE_POOLS[Persona.WARLORD]


def test_invalid_persona_is_rejected():
    with pytest.raises(ValueError):
        personality.create_specific(KingdomID("k"), "Human", "pirate", "balanced")
