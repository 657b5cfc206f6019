"""Service Factory for warcouncil.

Factory functions that wire a World to the services operating on it. Use
these in production code; tests construct the services directly with a
fixed random source.

Example:
    from warcouncil.factory import create_world, create_combat_service
    world = create_world(settings)
    combat = create_combat_service(world)
"""

from __future__ import annotations

from warcouncil.ai.coordinator import Coordinator
from warcouncil.config import Settings
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig
from warcouncil.interfaces.combat import ICombatService
from warcouncil.services.combat_service import CombatService
from warcouncil.services.simulation import BatchSimulator
from warcouncil.services.world import World
from warcouncil.utils.rng import SeededRandom, generate_seed


def create_world(settings: Settings, *, base_rules: RulesConfig = DEFAULT_RULES) -> World:
    """Create an empty World seeded from ``settings.simulation_seed``."""

    seed = generate_seed(0, 0, f"{settings.simulation_seed}:world")
    return World(
        rng=SeededRandom(seed),
        rules=settings.rules(base_rules),
        seed_prefix=settings.simulation_seed,
    )


def create_combat_service(world: World) -> ICombatService:
    return CombatService(world)


def create_coordinator(world: World) -> Coordinator:
    return Coordinator(rules=world.rules)


def create_batch_simulator(
    settings: Settings, *, base_rules: RulesConfig = DEFAULT_RULES
) -> BatchSimulator:
    rules = settings.rules(base_rules)
    return BatchSimulator(
        rules=rules,
        base_seed=settings.simulation_seed,
        max_turns=rules.simulation.max_turns,
    )
