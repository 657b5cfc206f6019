from pydantic import BaseModel, Field


class WorldSnapshotRequest(BaseModel):
    name: str = Field(default="default", pattern=r"^[A-Za-z0-9_-]+$")


class WorldSnapshotResponse(BaseModel):
    name: str
    tick: int
    kingdom_count: int
    battle_count: int


class WarRead(BaseModel):
    attacker_id: str
    defender_id: str
    state: str
    attack_count: int
