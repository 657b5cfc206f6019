from pydantic import BaseModel, ConfigDict, Field


class ResourcesSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gold: int = Field(default=0, description="Treasury")
    land: int = Field(default=0, description="Acres held")
    population: int = Field(default=0, description="Peasants")
    mana: int = Field(default=0, description="Elan available for spells")
    turns: int = Field(default=0, description="Stored action turns")


class BuildingsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    structures: int = 0
    forts: int = 0
    temples: int = 0
    critical: list[str] = Field(default_factory=list, description="Names of critical buildings")


class KingdomCreate(BaseModel):
    id: str = Field(..., min_length=1, description="Unique kingdom identifier")
    name: str = Field(..., min_length=1)
    race: str = Field(..., description="Race name; unknown races use neutral tables")
    resources: ResourcesSchema = Field(default_factory=ResourcesSchema)
    units: dict[str, int] = Field(default_factory=dict, description="Unit counts keyed by tier")
    buildings: BuildingsSchema = Field(default_factory=BuildingsSchema)
    scum: int = Field(default=0, description="Espionage units")
    alliances: list[str] = Field(default_factory=list)
    is_ai: bool = True
    ambush_active: bool = False


class KingdomRead(KingdomCreate):
    model_config = ConfigDict(from_attributes=True)

    networth: int = Field(..., description="land * 1000 + gold")
