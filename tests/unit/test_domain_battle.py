"""Unit tests for battle simulation."""

from __future__ import annotations

from warcouncil.domain import battle
from warcouncil.domain.enums import CombatOutcome
from warcouncil.domain.models import BattleID, Buildings, Kingdom, KingdomID, Resources


class LowRandom:
    def random(self) -> float:
        return 0.0

    def uniform(self, low: float, high: float) -> float:
        return low

    def randint(self, low: int, high: int) -> int:
        return low

    def choice(self, options):
        return options[0]


def _attacker() -> Kingdom:
    return Kingdom(
        id=KingdomID("atk"),
        name="Attacker",
        race="Droben",
        resources=Resources(gold=1000, land=500, population=2000, turns=20),
        units={"tier3": 200},
        buildings=Buildings(structures=250),
    )


def _defender() -> Kingdom:
    return Kingdom(
        id=KingdomID("def"),
        name="Defender",
        race="Human",
        resources=Resources(gold=20_000, land=1000, population=5000, turns=20),
        units={"tier1": 100},
        buildings=Buildings(structures=100),
    )


def test_simulate_battle_moves_land_gold_and_casualties():
    attacker = _attacker()
    defender = _defender()

    report = battle.simulate_battle(
        attacker, defender, battle_id=BattleID(7), tick=3, rng=LowRandom()
    )

    assert report.id == 7
    assert report.tick == 3
    assert report.result.outcome is CombatOutcome.WITH_EASE
    assert report.terrain == "plains"
    assert report.formation == "composition"

    assert attacker.resources.land == 570
    assert defender.resources.land == 930
    assert attacker.resources.gold == 21_000
    assert defender.resources.gold == 0
    assert defender.buildings.structures == 93
    assert defender.units["tier1"] == 80
    assert attacker.units["tier3"] == 195


def test_named_formation_overrides_composition():
    report = battle.simulate_battle(
        _attacker(), _defender(), formation="defensive", terrain="forest", rng=LowRandom()
    )
    assert report.formation == "defensive_wall"
    assert report.terrain == "forest"


def test_land_is_conserved():
    attacker = _attacker()
    defender = _defender()
    before = attacker.resources.land + defender.resources.land
    battle.simulate_battle(attacker, defender, rng=LowRandom())
    assert attacker.resources.land + defender.resources.land == before


def test_failed_attack_transfers_nothing():
    attacker = _attacker()
    attacker.units = {"tier1": 10}
    defender = _defender()
    report = battle.simulate_battle(attacker, defender, rng=LowRandom())
    assert report.result.outcome is CombatOutcome.FAILED
    assert defender.resources.land == 1000
    assert attacker.resources.land == 500
