"""Unit tests for combat rules."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from warcouncil.domain import combat, terrain
from warcouncil.domain.enums import AttackType, CombatOutcome, FormationType, TerrainType
from warcouncil.domain.models import (
    Buildings,
    InvalidInputError,
    Kingdom,
    KingdomID,
    Resources,
    UnitStack,
)
from warcouncil.utils.rng import SeededRandom


class LowRandom:
    """Always draws the bottom of every range."""

    def random(self) -> float:
        return 0.0

    def uniform(self, low: float, high: float) -> float:
        return low

    def randint(self, low: int, high: int) -> int:
        return low

    def choice(self, options):
        return options[0]


def _defender(**overrides) -> Kingdom:
    kingdom = Kingdom(
        id=KingdomID("def"),
        name="Defender",
        race="Human",
        resources=Resources(gold=50_000, land=1000, population=5000, turns=20),
        units={"tier1": 100},
        buildings=Buildings(structures=100),
    )
    for key, value in overrides.items():
        setattr(kingdom, key, value)
    return kingdom


def _infantry(count: int = 200) -> list[UnitStack]:
    return [UnitStack(id="a", unit_type="infantry", count=count, attack=5, defense=2)]


class TestTurnCost:
    def test_much_smaller_target_costs_six(self):
        assert combat.turn_cost(20_000, 5_000) == 6

    def test_much_larger_target_costs_eight(self):
        assert combat.turn_cost(5_000, 20_000) == 8

    def test_fair_fight_costs_four(self):
        assert combat.turn_cost(10_000, 10_000) == 4

    def test_band_edges_are_fair_fights(self):
        assert combat.turn_cost(10_000, 5_000) == 4
        assert combat.turn_cost(10_000, 20_000) == 4

    def test_zero_attacker_networth_does_not_divide_by_zero(self):
        assert combat.turn_cost(0, 10) == 8

    @given(
        attacker=st.integers(min_value=0, max_value=10**9),
        defender=st.integers(min_value=0, max_value=10**9),
    )
    def test_cost_is_always_one_of_three_values(self, attacker, defender):
        assert combat.turn_cost(attacker, defender) in {4, 6, 8}


def test_war_declaration_required_on_third_attack():
    assert [combat.requires_war_declaration(n) for n in (1, 2, 3)] == [False, False, True]


@pytest.mark.parametrize(
    ("ratio", "expected"),
    [
        (2.0, CombatOutcome.WITH_EASE),
        (1.99, CombatOutcome.GOOD_FIGHT),
        (1.2, CombatOutcome.GOOD_FIGHT),
        (1.19, CombatOutcome.FAILED),
    ],
)
def test_classify_outcome(ratio, expected):
    assert combat.classify_outcome(ratio) is expected


class TestAttackTypeValidation:
    def test_guerilla_raid_warns(self):
        result = combat.validate_attack_type("guerilla_raid", has_peasants=True)
        assert result.valid
        assert "no land" in result.warning

    def test_mob_assault_without_peasants_is_invalid(self):
        result = combat.validate_attack_type(AttackType.MOB_ASSAULT, has_peasants=False)
        assert not result.valid
        assert result.warning == combat.MOB_NO_PEASANTS

    def test_unknown_attack_type(self):
        with pytest.raises(InvalidInputError):
            combat.validate_attack_type("carpet_bombing", has_peasants=True)


class TestRacialHelpers:
    def test_fort_defense_uses_racial_value(self):
        assert combat.fort_defense("Goblin", 2) == 570
        assert combat.fort_defense("Dwarven", 1) == 300

    def test_fort_defense_defaults_for_other_races(self):
        assert combat.fort_defense("Elven", 2) == 500

    def test_summon_troops_unknown_race_uses_default_rate(self):
        assert combat.summon_troops("Human", 200_000) == 5000
        assert combat.summon_troops("Orc", 200_000) == 5000

    def test_army_reduction_only_after_easy_win(self):
        assert combat.optimal_army_reduction(1000, CombatOutcome.WITH_EASE) == 750
        assert combat.optimal_army_reduction(1000, CombatOutcome.GOOD_FIGHT) == 1000


def test_pass_the_plate_chains_attacks():
    result = combat.pass_the_plate([(1.0, 100), (1.0, 100)], 1000)
    assert result.total_land_gained == 73 + 68
    assert result.turns_required == 2
    assert result.efficiency == pytest.approx(70.5)


def test_pass_the_plate_with_nobody_attacking():
    result = combat.pass_the_plate([], 1000)
    assert result.total_land_gained == 0
    assert result.efficiency == 0.0


class TestResolveCombat:
    def test_overwhelming_attack_wins_with_ease(self):
        result = combat.resolve_combat(_infantry(), _defender(), rng=LowRandom())

        assert result.outcome is CombatOutcome.WITH_EASE
        assert result.offense_ratio == pytest.approx(1000 / 300)
        assert result.land_gained == 70
        assert result.gold_looted == 50_000
        assert result.structures_destroyed == 7
        assert result.defender_casualties == {"def-tier1": 20}
        assert result.attacker_casualties == {"a": 9}
        assert result.success

    def test_inputs_are_not_mutated(self):
        defender = _defender()
        units = _infantry()
        combat.resolve_combat(units, defender, rng=LowRandom())
        assert defender.resources.land == 1000
        assert units[0].count == 200

    def test_zero_defense_uses_sentinel_ratio(self):
        defender = _defender(units={})
        result = combat.resolve_combat(_infantry(), defender, rng=LowRandom())
        assert result.offense_ratio == 999.0
        assert result.outcome is CombatOutcome.WITH_EASE

    def test_ambush_cripples_the_attack(self):
        defender = _defender(ambush_active=True)
        result = combat.resolve_combat(_infantry(), defender, rng=LowRandom())
        assert result.outcome is CombatOutcome.FAILED
        assert result.land_gained == 0
        assert result.warnings

    def test_forts_add_to_defense(self):
        defender = _defender(buildings=Buildings(structures=100, forts=4))
        result = combat.resolve_combat(_infantry(), defender, rng=LowRandom())
        assert result.offense_ratio == pytest.approx(1000 / 1300)

    def test_guerilla_raid_takes_no_land(self):
        result = combat.resolve_combat(
            _infantry(), _defender(), attack_type="guerilla_raid", rng=LowRandom()
        )
        assert result.land_gained == 0
        assert result.gold_looted == 0
        assert result.warnings == [combat.GUERILLA_WARNING]

    def test_mob_assault_takes_less_land(self):
        result = combat.resolve_combat(
            _infantry(),
            _defender(),
            attack_type=AttackType.MOB_ASSAULT,
            attacker_population=1000,
            rng=LowRandom(),
        )
        assert result.land_gained == 56

    def test_mob_assault_without_peasants_is_rejected(self):
        with pytest.raises(InvalidInputError, match="peasants"):
            combat.resolve_combat(
                _infantry(),
                _defender(),
                attack_type="mob_assault",
                attacker_population=0,
                rng=LowRandom(),
            )

    def test_controlled_strike_uses_requested_percentage(self):
        result = combat.resolve_combat(
            _infantry(),
            _defender(),
            attack_type="controlled_strike",
            cs_percentage=0.05,
            rng=LowRandom(),
        )
        assert result.land_gained == 50

    def test_controlled_strike_percentage_is_clamped(self):
        result = combat.resolve_combat(
            _infantry(),
            _defender(),
            attack_type="controlled_strike",
            cs_percentage=5.0,
            rng=LowRandom(),
        )
        assert result.land_gained == 1000

    def test_negative_unit_count_is_rejected(self):
        with pytest.raises(InvalidInputError):
            combat.resolve_combat(_infantry(-1), _defender(), rng=LowRandom())

    @given(land=st.integers(min_value=1, max_value=100_000), seed=st.text(min_size=1))
    def test_with_ease_land_stays_in_band(self, land, seed):
        defender = _defender()
        defender.resources.land = land
        result = combat.resolve_combat(_infantry(), defender, rng=SeededRandom(seed))
        assert result.outcome is CombatOutcome.WITH_EASE
        assert land * 0.070 - 1 <= result.land_gained <= land * 0.0735 + 1e-6


unit_stacks = st.lists(
    st.tuples(
        st.sampled_from(["tier1", "tier2", "tier3", "tier4"]),
        st.integers(min_value=0, max_value=100_000),
        st.floats(min_value=0, max_value=50),
        st.floats(min_value=0, max_value=50),
    ),
    max_size=6,
)


@given(
    stacks=unit_stacks,
    defender_units=st.dictionaries(
        st.sampled_from(["tier1", "tier2", "tier3", "tier4"]),
        st.integers(min_value=0, max_value=100_000),
    ),
    land=st.integers(min_value=0, max_value=100_000),
    gold=st.integers(min_value=0, max_value=10_000_000),
    structures=st.integers(min_value=0, max_value=100_000),
    forts=st.integers(min_value=0, max_value=50),
    terrain_type=st.sampled_from(list(TerrainType)),
    formation_type=st.sampled_from(list(FormationType)),
    attack_type=st.sampled_from(
        [AttackType.FULL_ATTACK, AttackType.CONTROLLED_STRIKE, AttackType.GUERILLA_RAID]
    ),
    seed=st.text(min_size=1, max_size=8),
)
def test_losses_and_land_never_exceed_what_exists(
    stacks,
    defender_units,
    land,
    gold,
    structures,
    forts,
    terrain_type,
    formation_type,
    attack_type,
    seed,
):
    attackers = [
        UnitStack(f"s{i}", unit_type, count, attack, defense)
        for i, (unit_type, count, attack, defense) in enumerate(stacks)
    ]
    defender = _defender(
        units=dict(defender_units),
        buildings=Buildings(structures=structures, forts=forts),
    )
    defender.resources.land = land
    defender.resources.gold = gold

    result = combat.resolve_combat(
        attackers,
        defender,
        formation=terrain.FORMATIONS[formation_type],
        terrain=terrain.terrain_modifier(terrain_type),
        attack_type=attack_type,
        rng=SeededRandom(seed),
    )

    counts = {stack.id: stack.count for stack in attackers}
    for stack_id, lost in result.attacker_casualties.items():
        assert 0 < lost <= counts[stack_id]
    for stack_id, lost in result.defender_casualties.items():
        assert 0 < lost <= defender_units[stack_id.removeprefix("def-")]
    assert 0 <= result.land_gained <= land
    assert 0 <= result.gold_looted <= gold
    assert 0 <= result.structures_destroyed <= structures


class TestCommittedStacks:
    def _attacker(self) -> Kingdom:
        return Kingdom(
            id=KingdomID("atk"),
            name="Attacker",
            race="Droben",
            units={"tier1": 50, "tier3": 200},
        )

    def test_stats_come_from_the_race_table(self):
        own = combat.tier_stacks(self._attacker(), "atk")
        committed = combat.committed_stacks(
            self._attacker(),
            [
                UnitStack("a", "tier3", 120, 999, 999),
                UnitStack("b", "tier3", 80, 0, 0),
                UnitStack("c", "tier1", 50, 0, 0),
            ],
        )
        assert committed == own

    def test_partial_commitment(self):
        committed = combat.committed_stacks(
            self._attacker(), [UnitStack("a", "tier3", 10, 4, 4)]
        )
        assert [(s.id, s.count) for s in committed] == [("atk-tier3", 10)]

    @pytest.mark.parametrize(
        "stack",
        [
            UnitStack("x", "tier2", 1, 2, 3),
            UnitStack("x", "tier3", 201, 4, 4),
            UnitStack("x", "peasant", 1, 1, 1),
            UnitStack("x", "tier1", -5, 1, 1),
        ],
    )
    def test_rejects_units_not_held(self, stack):
        with pytest.raises(InvalidInputError):
            combat.committed_stacks(self._attacker(), [stack])
