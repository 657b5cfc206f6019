"""Service layer for warcouncil.

Services own the orchestration around the pure rules in ``warcouncil.domain``
and ``warcouncil.ai``:

- World: per-game mutable state (kingdoms, personality cache, wars,
  battle history, restorations, tick counter)
- CombatService: validated, policy-checked attack resolution (implements
  ``ICombatService``)
- BatchSimulator: seeded AI-vs-AI games summarised into a balance report

Production Usage:
    from warcouncil.factory import create_combat_service
    combat = create_combat_service(world)
    result = combat.resolve_combat(attacker_id, defender_id)

Testing Usage:
    from warcouncil.services import World

    class FixedRandom:
        def uniform(self, low, high):
            return low

    world = World(rng=FixedRandom())
"""

from warcouncil.services.combat_service import CombatService
from warcouncil.services.simulation import BalanceReport, BatchSimulator, GameFailure, GameResult
from warcouncil.services.world import UnknownKingdomError, World, WorldSnapshot

__all__ = [
    "BalanceReport",
    "BatchSimulator",
    "CombatService",
    "GameFailure",
    "GameResult",
    "UnknownKingdomError",
    "World",
    "WorldSnapshot",
]
