"""Random Source Protocol Interface.

Every random draw in the engine (land-gain jitter, theft checks,
personality selection in batch games) goes through this protocol so tests
can force exact sequences.
"""

from collections.abc import Sequence
from typing import Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Protocol for an injectable stream of random values."""

    def random(self) -> float:
        """Return a float in ``[0.0, 1.0)``."""
        ...

    def uniform(self, low: float, high: float) -> float:
        """Return a float in ``[low, high]``."""
        ...

    def randint(self, low: int, high: int) -> int:
        """Return an integer in ``[low, high]``."""
        ...

    def choice(self, options: Sequence[T]) -> T:
        """Return one element of a non-empty sequence."""
        ...
