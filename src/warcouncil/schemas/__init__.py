from .combat import BattleReportRead, CombatRequest, CombatResultRead, UnitStackSchema
from .decision import DecisionRead, DecisionRequest, StrategicDecisionRead
from .kingdom import BuildingsSchema, KingdomCreate, KingdomRead, ResourcesSchema
from .personality import PersonalityRead, PersonalityRequest
from .world import WarRead, WorldSnapshotRequest, WorldSnapshotResponse

__all__ = [
    "BattleReportRead",
    "BuildingsSchema",
    "CombatRequest",
    "CombatResultRead",
    "DecisionRead",
    "DecisionRequest",
    "KingdomCreate",
    "KingdomRead",
    "PersonalityRead",
    "PersonalityRequest",
    "ResourcesSchema",
    "StrategicDecisionRead",
    "UnitStackSchema",
    "WarRead",
    "WorldSnapshotRequest",
    "WorldSnapshotResponse",
]
