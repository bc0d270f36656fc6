"""
Random source module for the game.

Every random draw made by the rules (damage rolls, archetype picks, AI
checks, level-up growth, loot) goes through a single injectable `Dice`
instance so that encounters are reproducible under a fixed seed.
"""

from random import Random
from typing import Sequence, TypeVar

T = TypeVar("T")


class Dice:
    """Seedable wrapper around random.Random exposing the draws the rules need."""

    def __init__(self, seed: int | None = None) -> None:
        """
        Initialize the Dice.

        Args:
            seed (int | None):
                Seed for the underlying generator. None seeds from system
                entropy.

        """
        self.seed = seed
        self._random = Random(seed)

    def randint(self, low: int, high: int) -> int:
        """Return a random integer N such that low <= N <= high."""
        return self._random.randint(low, high)

    def random(self) -> float:
        """Return the next random floating point number in [0.0, 1.0)."""
        return self._random.random()

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.random() < probability

    def choice(self, seq: Sequence[T]) -> T:
        """Return a uniformly chosen element of a non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return seq[self.randint(0, len(seq) - 1)]
