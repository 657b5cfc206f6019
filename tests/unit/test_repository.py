"""Unit tests for the JSON world repository."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from warcouncil.domain.enums import AttackType, CombatOutcome, RestorationType
from warcouncil.domain.models import (
    BattleID,
    BattleReport,
    Buildings,
    CombatResult,
    Kingdom,
    KingdomID,
    Resources,
    WarDeclaration,
)
from warcouncil.domain.restoration import restoration_status
from warcouncil.repository import JsonWorldRepository
from warcouncil.services.world import WorldSnapshot


def _snapshot() -> WorldSnapshot:
    damaged_at = datetime(2024, 5, 1, 12, tzinfo=UTC)
    return WorldSnapshot(
        game_id=2,
        tick=14,
        next_battle_id=2,
        kingdoms=[
            Kingdom(
                id=KingdomID("k1"),
                name="Northmarch",
                race="Dwarven",
                resources=Resources(gold=500, land=300, population=900, turns=12),
                units={"tier1": 40, "tier4": 5},
                buildings=Buildings(structures=150, forts=2, critical=["palace"]),
                alliances={KingdomID("k2")},
            )
        ],
        wars=[WarDeclaration(KingdomID("k1"), KingdomID("k2"), attack_count=2)],
        battles=[
            BattleReport(
                id=BattleID(1),
                tick=13,
                attacker_id=KingdomID("k1"),
                defender_id=KingdomID("k2"),
                result=CombatResult(
                    CombatOutcome.GOOD_FIGHT,
                    1.5,
                    attacker_casualties={"atk-tier1": 6},
                    land_gained=20,
                    attack_type=AttackType.FULL_ATTACK,
                ),
                terrain="plains",
                formation="balanced",
            )
        ],
        restorations={
            "k2": restoration_status(damaged_at, RestorationType.DAMAGE_BASED, damaged_at)
        },
    )


def test_save_and_load_round_trip(tmp_path):
    repo = JsonWorldRepository(tmp_path)
    snapshot = _snapshot()

    path = repo.save("alpha", snapshot)

    assert path == tmp_path / "world_alpha.json"
    assert repo.load("alpha") == snapshot


def test_list_and_delete(tmp_path):
    repo = JsonWorldRepository(tmp_path)
    repo.save("b", WorldSnapshot())
    repo.save("a", WorldSnapshot())
    (tmp_path / "notes.txt").write_text("ignored")

    assert repo.list_worlds() == ["a", "b"]

    repo.delete("a")
    repo.delete("missing")
    assert repo.list_worlds() == ["b"]


def test_missing_snapshot(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonWorldRepository(tmp_path).load("nope")


@pytest.mark.parametrize("name", ["../escape", "", "with space", "dot.json"])
def test_invalid_names(tmp_path, name):
    with pytest.raises(ValueError):
        JsonWorldRepository(tmp_path).save(name, WorldSnapshot())


def test_base_path_is_created(tmp_path):
    target = tmp_path / "nested" / "worlds"
    JsonWorldRepository(target)
    assert target.is_dir()
