"""Domain layer for warcouncil.

This package hosts every game rule that does not need orchestration:

* Dataclasses describing kingdoms, personalities and combat records
  (see :mod:`models`).
* Enumerations and strongly-typed identifiers used across the rules layer.
* Rule configuration objects (see :mod:`rules_config`) and per-race tables
  (see :mod:`races`).
* Pure rule functions for combat, sorcery, thievery and restoration, plus
  the battle simulator and the war-declaration tracker.

Everything here operates purely in memory; persistence goes through the
thin repository adapter.
"""

from . import (
    battle,
    combat,
    enums,
    models,
    races,
    restoration,
    rules_config,
    sorcery,
    terrain,
    thievery,
    war,
)

__all__ = [
    "battle",
    "combat",
    "enums",
    "models",
    "races",
    "restoration",
    "rules_config",
    "sorcery",
    "terrain",
    "thievery",
    "war",
]
