from pydantic import BaseModel, ConfigDict, Field


class PersonalityRequest(BaseModel):
    kingdom_id: str = Field(..., min_length=1)
    race: str
    persona: str | None = Field(None, description="Explicit persona; drawn from the race pool if omitted")
    playstyle: str | None = Field(None, description="Explicit playstyle; drawn if omitted")


class TraitsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    aggression: float
    economy: float
    magic: float
    diplomacy: float
    risk: float
    patience: float
    adaptability: float
    loyalty: float


class ModifiersSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    attack_threshold: float
    build_priority: float
    military_focus: float
    magic_focus: float
    defensive_focus: float
    alliance_value: float
    trade_frequency: float
    war_declaration_cost: float


class BehaviorSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    preferred_targets: list[str]
    avoided_targets: list[str]
    alliance_strategy: str
    economic_strategy: str
    military_strategy: str
    endgame_strategy: str
    quirks: list[str]


class PersonalityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kingdom_id: str
    race: str
    persona: str
    playstyle: str
    name: str
    title: str
    description: str
    traits: TraitsSchema
    modifiers: ModifiersSchema
    behavior: BehaviorSchema
