"""Utility functions for the warcouncil engine."""

from warcouncil.utils.rng import SeededRandom, generate_seed, random_choice

__all__ = [
    "SeededRandom",
    "generate_seed",
    "random_choice",
]
