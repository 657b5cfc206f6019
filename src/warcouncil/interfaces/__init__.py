"""Protocol-based interfaces for warcouncil services.

This module exports the protocol interfaces, providing a clear contract for
implementations and enabling dependency injection and testing.
"""

from warcouncil.interfaces.combat import ICombatService
from warcouncil.interfaces.random_source import RandomSource

__all__ = [
    "ICombatService",
    "RandomSource",
]
