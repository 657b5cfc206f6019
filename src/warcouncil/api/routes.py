"""HTTP routes for the warcouncil API."""

from __future__ import annotations

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from warcouncil.ai.coordinator import ComprehensiveDecision
from warcouncil.api.runtime import ApiState
from warcouncil.domain.models import (
    Buildings,
    Kingdom,
    KingdomID,
    Resources,
    UnitStack,
)
from warcouncil.schemas import (
    BattleReportRead,
    CombatRequest,
    CombatResultRead,
    DecisionRead,
    DecisionRequest,
    KingdomCreate,
    KingdomRead,
    PersonalityRead,
    PersonalityRequest,
    StrategicDecisionRead,
    WarRead,
    WorldSnapshotRequest,
    WorldSnapshotResponse,
)
from warcouncil.schemas.decision import BuildStepRead, TargetRead

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


def _kingdom_from_request(request: KingdomCreate) -> Kingdom:
    return Kingdom(
        id=KingdomID(request.id),
        name=request.name,
        race=request.race,
        resources=Resources(**request.resources.model_dump()),
        units=dict(request.units),
        buildings=Buildings(**request.buildings.model_dump()),
        scum=request.scum,
        alliances={KingdomID(a) for a in request.alliances},
        is_ai=request.is_ai,
        ambush_active=request.ambush_active,
    )


def _kingdom_read(kingdom: Kingdom) -> KingdomRead:
    return KingdomRead.model_validate(
        {
            "id": kingdom.id,
            "name": kingdom.name,
            "race": kingdom.race,
            "resources": asdict(kingdom.resources),
            "units": kingdom.units,
            "buildings": asdict(kingdom.buildings),
            "scum": kingdom.scum,
            "alliances": sorted(kingdom.alliances),
            "is_ai": kingdom.is_ai,
            "ambush_active": kingdom.ambush_active,
            "networth": kingdom.networth,
        }
    )


def _decision_read(decision: ComprehensiveDecision) -> DecisionRead:
    analysis = decision.analysis
    return DecisionRead(
        kingdom_id=decision.kingdom_id,
        turn=decision.turn,
        phase=analysis.phase.value,
        position=analysis.position.value,
        market=analysis.market.value,
        recommendation=analysis.recommendation,
        confidence=decision.confidence,
        primary_action=StrategicDecisionRead.model_validate(decision.primary_action),
        build_order=[BuildStepRead.model_validate(step) for step in decision.build_order.steps],
        targets=[
            TargetRead(
                target_id=target.target_id,
                target_name=target.target_name,
                overall_score=target.overall_score,
                recommendation=target.recommendation.value,
                success_probability=target.combat.success_probability,
                expected_land_gain=target.combat.expected_land_gain,
                turn_cost=target.combat.turn_cost,
                efficiency=target.combat.efficiency,
                war_declaration_risk=target.risk.war_declaration_risk,
            )
            for target in decision.target_analyses
        ],
        attack_plan_turns=decision.attack_plan.total_turns if decision.attack_plan else None,
        reasoning=decision.reasoning,
        advice=decision.advice,
    )


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "rules_version": state.settings.rules_version,
        "tick": state.world.tick,
        "kingdoms": len(state.world.kingdoms()),
    }


@router.get("/rules")
async def rules(state: ApiStateDep) -> dict[str, object]:
    return asdict(state.rules)


@router.get("/kingdoms", response_model=list[KingdomRead])
async def list_kingdoms(state: ApiStateDep) -> list[KingdomRead]:
    return [_kingdom_read(kingdom) for kingdom in state.world.kingdoms()]


@router.post("/kingdoms", response_model=KingdomRead, status_code=status.HTTP_201_CREATED)
async def register_kingdom(request: KingdomCreate, state: ApiStateDep) -> KingdomRead:
    kingdom = state.world.add_kingdom(_kingdom_from_request(request))
    return _kingdom_read(kingdom)


@router.post("/combat", response_model=BattleReportRead)
async def resolve_combat(request: CombatRequest, state: ApiStateDep) -> BattleReportRead:
    units = (
        [UnitStack(**stack.model_dump()) for stack in request.attacker_units]
        if request.attacker_units is not None
        else None
    )
    report = state.combat.attack(
        KingdomID(request.attacker_id),
        KingdomID(request.defender_id),
        attacker_units=units,
        formation_id=request.formation_id,
        terrain_id=request.terrain_id,
        attack_type=request.attack_type,
        cs_percentage=request.cs_percentage,
    )
    return BattleReportRead(
        id=report.id,
        tick=report.tick,
        attacker_id=report.attacker_id,
        defender_id=report.defender_id,
        terrain=report.terrain,
        formation=report.formation,
        result=CombatResultRead.model_validate(report.result),
    )


@router.post("/kingdoms/{kingdom_id}/decision", response_model=DecisionRead)
async def make_decision(
    kingdom_id: str, state: ApiStateDep, request: DecisionRequest | None = None
) -> DecisionRead:
    kingdom = state.world.kingdom(KingdomID(kingdom_id))
    tick = request.tick if request is not None and request.tick is not None else state.world.tick
    decision = state.coordinator.make_decision(kingdom, state.world, tick)
    return _decision_read(decision)


@router.post("/personalities", response_model=PersonalityRead)
async def generate_personality(request: PersonalityRequest, state: ApiStateDep) -> PersonalityRead:
    try:
        personality = state.world.personality(
            KingdomID(request.kingdom_id),
            request.race,
            persona=request.persona,
            playstyle=request.playstyle,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return PersonalityRead.model_validate(personality)


@router.post("/kingdoms/{attacker_id}/war/{defender_id}", response_model=WarRead)
async def declare_war(attacker_id: str, defender_id: str, state: ApiStateDep) -> WarRead:
    wars = state.world.wars
    record = wars.declare_war(KingdomID(attacker_id), KingdomID(defender_id), state.world.tick)
    return WarRead(
        attacker_id=record.attacker_id,
        defender_id=record.defender_id,
        state=wars.state(record.attacker_id, record.defender_id).value,
        attack_count=record.attack_count,
    )


@router.delete("/kingdoms/{attacker_id}/war/{defender_id}", response_model=WarRead)
async def make_peace(attacker_id: str, defender_id: str, state: ApiStateDep) -> WarRead:
    wars = state.world.wars
    attacker, defender = KingdomID(attacker_id), KingdomID(defender_id)
    wars.make_peace(attacker, defender)
    return WarRead(
        attacker_id=attacker,
        defender_id=defender,
        state=wars.state(attacker, defender).value,
        attack_count=wars.attack_count(attacker, defender),
    )


@router.get("/battles", response_model=list[BattleReportRead])
async def battle_history(state: ApiStateDep) -> list[BattleReportRead]:
    return [
        BattleReportRead(
            id=report.id,
            tick=report.tick,
            attacker_id=report.attacker_id,
            defender_id=report.defender_id,
            terrain=report.terrain,
            formation=report.formation,
            result=CombatResultRead.model_validate(report.result),
        )
        for report in state.combat.battle_history()
    ]


@router.post("/world/save", response_model=WorldSnapshotResponse)
async def save_world(request: WorldSnapshotRequest, state: ApiStateDep) -> WorldSnapshotResponse:
    state.save_world(request.name)
    return WorldSnapshotResponse(
        name=request.name,
        tick=state.world.tick,
        kingdom_count=len(state.world.kingdoms()),
        battle_count=len(state.world.battle_history()),
    )


@router.post("/world/load", response_model=WorldSnapshotResponse)
async def load_world(request: WorldSnapshotRequest, state: ApiStateDep) -> WorldSnapshotResponse:
    try:
        state.load_world(request.name)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Snapshot not found") from exc
    return WorldSnapshotResponse(
        name=request.name,
        tick=state.world.tick,
        kingdom_count=len(state.world.kingdoms()),
        battle_count=len(state.world.battle_history()),
    )
