"""Runtime primitives backing the warcouncil HTTP API."""

from __future__ import annotations

import logging

from warcouncil.ai.coordinator import Coordinator
from warcouncil.config import Settings, get_settings
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig
from warcouncil.factory import create_combat_service, create_coordinator, create_world
from warcouncil.interfaces.combat import ICombatService
from warcouncil.repository import JsonWorldRepository
from warcouncil.services.world import World

logger = logging.getLogger(__name__)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self, *, settings: Settings | None = None, rules: RulesConfig = DEFAULT_RULES
    ) -> None:
        self.settings = settings or get_settings()
        self.repository = JsonWorldRepository(self.settings.data_dir)
        self.world: World = create_world(self.settings, base_rules=rules)
        self.rules = self.world.rules
        self.combat: ICombatService = create_combat_service(self.world)
        self.coordinator: Coordinator = create_coordinator(self.world)

    def save_world(self, name: str) -> None:
        path = self.repository.save(name, self.world.snapshot())
        logger.info("Saved world snapshot %s to %s", name, path)

    def load_world(self, name: str) -> None:
        """Replace the live world with a stored snapshot; ``FileNotFoundError`` if absent."""

        snapshot = self.repository.load(name)
        self.world.restore(snapshot)
        logger.info("Loaded world snapshot %s at tick %d", name, snapshot.tick)

    async def shutdown(self) -> None:
        logger.debug("API state shut down with %d kingdoms", len(self.world.kingdoms()))


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
