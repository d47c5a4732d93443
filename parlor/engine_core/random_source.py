"""
Random Source - The only source of randomness in the engine.

Shuffles, room codes and word selection all draw from an injected
RandomSource so tests can pin every outcome with a seed.
"""

from __future__ import annotations
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """
    Seedable randomness capability.

    Usage:
        rng = RandomSource(seed=42)
        tiles = rng.shuffled(range(9))
        word = rng.choice(WORDS)
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def shuffled(self, items: Sequence[T]) -> list[T]:
        """Return a uniformly shuffled copy (Fisher-Yates)."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self._rng.randint(0, i)
            result[i], result[j] = result[j], result[i]
        return result

    def choice(self, items: Sequence[T]) -> T:
        """Pick one item uniformly."""
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self._rng.randrange(len(items))]

    def sample(self, items: Sequence[T], count: int) -> list[T]:
        """Pick `count` distinct items."""
        return self._rng.sample(list(items), count)

    def token(self, alphabet: str, length: int) -> str:
        """Random string of `length` characters drawn from `alphabet`."""
        return "".join(self.choice(alphabet) for _ in range(length))
