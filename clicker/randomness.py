"""Injectable random sources.

Every probabilistic branch in the engine (names, titles, MMR jitter,
forfeits, bracket seeding, stage placements) draws from a RandomSource so
that callers can pass a seeded or scripted generator.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import List, MutableSequence, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(ABC):
    """Minimal random-number interface used by the engine."""

    @abstractmethod
    def random(self) -> float:
        """Return a float in [0, 1)."""
        ...

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()

    def randint(self, a: int, b: int) -> int:
        """Inclusive integer in [a, b]."""
        if b <= a:
            return a
        return a + min(b - a, int(self.random() * (b - a + 1)))

    def chance(self, probability: float) -> bool:
        return self.random() < probability

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("cannot choose from an empty sequence")
        return seq[min(len(seq) - 1, int(self.random() * len(seq)))]

    def shuffle(self, seq: MutableSequence[T]) -> None:
        # Fisher-Yates
        for i in range(len(seq) - 1, 0, -1):
            j = self.randint(0, i)
            seq[i], seq[j] = seq[j], seq[i]

    def sample(self, seq: Sequence[T], k: int) -> List[T]:
        pool = list(seq)
        self.shuffle(pool)
        return pool[:k]


class SeededRandom(RandomSource):
    """RandomSource backed by random.Random."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()

    def uniform(self, a: float, b: float) -> float:
        return self._rng.uniform(a, b)

    def randint(self, a: int, b: int) -> int:
        if b <= a:
            return a
        return self._rng.randint(a, b)

    def shuffle(self, seq: MutableSequence[T]) -> None:
        self._rng.shuffle(seq)


def default_random(seed: Optional[int] = None) -> RandomSource:
    return SeededRandom(seed)
