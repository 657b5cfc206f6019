from pydantic import BaseModel, ConfigDict, Field


class UnitStackSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    unit_type: str
    count: int
    attack: float
    defense: float


class CombatRequest(BaseModel):
    attacker_id: str = Field(..., min_length=1)
    defender_id: str = Field(..., min_length=1)
    attacker_units: list[UnitStackSchema] | None = Field(
        None, description="Explicit stacks; defaults to the attacker's own army"
    )
    formation_id: str | None = None
    terrain_id: str | None = None
    attack_type: str = "full_attack"
    cs_percentage: float | None = Field(
        None, description="Controlled strike land percentage (0.01 - 1.0)"
    )


class CombatResultRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    outcome: str
    offense_ratio: float
    attacker_casualties: dict[str, int]
    defender_casualties: dict[str, int]
    land_gained: int
    gold_looted: int
    structures_destroyed: int
    attack_type: str
    warnings: list[str]
    success: bool


class BattleReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tick: int
    attacker_id: str
    defender_id: str
    terrain: str | None
    formation: str | None
    result: CombatResultRead
