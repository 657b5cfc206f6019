from pydantic import BaseModel, ConfigDict, Field


class DecisionRequest(BaseModel):
    tick: int | None = Field(None, ge=0, description="Game turn; defaults to the world tick")


class AllocationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gold_spend: int
    turns_spend: int
    expected_return: float
    risk_level: str


class StrategicDecisionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    action: str
    priority: int
    reasoning: list[str]
    target_id: str | None
    allocation: AllocationSchema | None
    personality_influence: str | None


class TargetRead(BaseModel):
    target_id: str
    target_name: str
    overall_score: float
    recommendation: str
    success_probability: float
    expected_land_gain: int
    turn_cost: int
    efficiency: float
    war_declaration_risk: bool


class BuildStepRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    priority: float
    gold_cost: int
    turn_cost: int
    expected_benefit: int
    description: str


class DecisionRead(BaseModel):
    kingdom_id: str
    turn: int
    phase: str
    position: str
    market: str
    recommendation: str
    confidence: float
    primary_action: StrategicDecisionRead
    build_order: list[BuildStepRead]
    targets: list[TargetRead]
    attack_plan_turns: int | None
    reasoning: list[str]
    advice: list[str]
