"""HTTP-level tests for the FastAPI routes."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from warcouncil.api.app import create_app
from warcouncil.api.runtime import ApiState
from warcouncil.config import Settings

ATTACKER = {
    "id": "atk",
    "name": "Ironhold",
    "race": "Droben",
    "resources": {"gold": 1000, "land": 500, "population": 2000, "turns": 20},
    "units": {"tier3": 200},
    "buildings": {"structures": 250},
}

DEFENDER = {
    "id": "def",
    "name": "Meadowvale",
    "race": "Human",
    "resources": {"gold": 20000, "land": 1000, "population": 5000, "turns": 20},
    "units": {"tier1": 100},
    "buildings": {"structures": 1000},
}


def _make_app(tmp_path):
    return create_app(state_factory=lambda: ApiState(settings=Settings(data_dir=tmp_path)))


async def _register(client: AsyncClient) -> None:
    for payload in (ATTACKER, DEFENDER):
        response = await client.post("/kingdoms", json=payload)
        assert response.status_code == 201


@pytest.mark.asyncio
async def test_health_and_rules(tmp_path):
    app = _make_app(tmp_path)
    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client,
    ):
        health = await client.get("/health")
        rules = await client.get("/rules")

    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert health.json()["kingdoms"] == 0
    assert rules.json()["combat"]["base_turn_cost"] == 4


@pytest.mark.asyncio
async def test_register_and_list_kingdoms(tmp_path):
    app = _make_app(tmp_path)
    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client,
    ):
        await _register(client)
        response = await client.get("/kingdoms")
        bad = await client.post(
            "/kingdoms",
            json={"id": "neg", "name": "Neg", "race": "Human", "resources": {"gold": -1}},
        )

    assert response.status_code == 200
    listed = {k["id"]: k for k in response.json()}
    assert set(listed) == {"atk", "def"}
    assert listed["def"]["networth"] == 1000 * 1000 + 20000
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_combat_and_battle_history(tmp_path):
    app = _make_app(tmp_path)
    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client,
    ):
        await _register(client)
        combat = await client.post("/combat", json={"attacker_id": "atk", "defender_id": "def"})
        history = await client.get("/battles")
        missing = await client.post(
            "/combat", json={"attacker_id": "atk", "defender_id": "ghost"}
        )
        self_attack = await client.post(
            "/combat", json={"attacker_id": "atk", "defender_id": "atk"}
        )
        bad_type = await client.post(
            "/combat",
            json={"attacker_id": "atk", "defender_id": "def", "attack_type": "siege"},
        )

    assert combat.status_code == 200
    body = combat.json()
    assert body["id"] == 1
    assert body["result"]["outcome"] == "with_ease"
    assert 70 <= body["result"]["land_gained"] <= 73
    assert body["result"]["success"] is True
    assert [b["id"] for b in history.json()] == [1]
    assert missing.status_code == 404
    assert self_attack.status_code == 422
    assert bad_type.status_code == 422


@pytest.mark.asyncio
async def test_decision_endpoint(tmp_path):
    app = _make_app(tmp_path)
    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client,
    ):
        await _register(client)
        response = await client.post("/kingdoms/atk/decision", json={"tick": 5})
        missing = await client.post("/kingdoms/ghost/decision")

    assert response.status_code == 200
    body = response.json()
    assert body["kingdom_id"] == "atk"
    assert body["turn"] == 5
    assert body["phase"] == "early"
    assert body["primary_action"]["action"] in {"build", "train", "attack", "defend", "wait"}
    assert 0.1 <= body["confidence"] <= 1.0
    assert [t["target_id"] for t in body["targets"]] == ["def"]
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_personality_endpoint(tmp_path):
    app = _make_app(tmp_path)
    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client,
    ):
        chosen = await client.post(
            "/personalities",
            json={
                "kingdom_id": "atk",
                "race": "Droben",
                "persona": "berserker",
                "playstyle": "aggressive",
            },
        )
        cached = await client.post("/personalities", json={"kingdom_id": "atk", "race": "Droben"})
        bad = await client.post(
            "/personalities",
            json={"kingdom_id": "x", "race": "Human", "persona": "jester", "playstyle": "calm"},
        )

    assert chosen.status_code == 200
    assert chosen.json()["persona"] == "berserker"
    assert cached.json() == chosen.json()
    assert chosen.json()["traits"]["aggression"] > 1.0
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_war_endpoints(tmp_path):
    app = _make_app(tmp_path)
    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client,
    ):
        await _register(client)
        early = await client.post("/kingdoms/atk/war/def")
        for _ in range(3):
            await client.post("/combat", json={"attacker_id": "atk", "defender_id": "def"})
        declared = await client.post("/kingdoms/atk/war/def")
        peace = await client.delete("/kingdoms/atk/war/def")
        again = await client.delete("/kingdoms/atk/war/def")

    assert early.status_code == 409
    assert declared.status_code == 200
    assert declared.json()["state"] == "at_war"
    assert declared.json()["attack_count"] == 3
    assert peace.json()["state"] == "neutral"
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_save_and_load_world(tmp_path):
    app = _make_app(tmp_path)
    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client,
    ):
        await _register(client)
        saved = await client.post("/world/save", json={"name": "slot1"})
        await client.post(
            "/kingdoms", json={"id": "late", "name": "Latecomer", "race": "Fae"}
        )
        loaded = await client.post("/world/load", json={"name": "slot1"})
        listed = await client.get("/kingdoms")
        missing = await client.post("/world/load", json={"name": "nope"})
        invalid = await client.post("/world/save", json={"name": "../x"})

    assert saved.status_code == 200
    assert saved.json()["kingdom_count"] == 2
    assert (tmp_path / "world_slot1.json").exists()
    assert loaded.json()["kingdom_count"] == 2
    assert {k["id"] for k in listed.json()} == {"atk", "def"}
    assert missing.status_code == 404
    assert invalid.status_code == 422
