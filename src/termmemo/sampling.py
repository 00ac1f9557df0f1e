"""
Random sources and the shuffle/sample primitives used by the quiz generator.

Every random draw goes through a ``RandomSource`` so callers can inject a
seeded source and get reproducible quizzes.
"""

import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(ABC):
    """Abstract source of uniformly distributed indices."""

    @abstractmethod
    def next_index(self, n: int) -> int:
        """
        Return an integer drawn uniformly from [0, n).

        Args:
            n: Exclusive upper bound, must be positive.
        """
        pass


class SystemRandomSource(RandomSource):
    """Non-deterministic source backed by the operating system's entropy."""

    def __init__(self):
        self._random = random.SystemRandom()

    def next_index(self, n: int) -> int:
        return self._random.randrange(n)


class SeededRandomSource(RandomSource):
    """Deterministic source for reproducible runs."""

    def __init__(self, seed: int = 0):
        self.seed = seed
        self._random = random.Random(seed)

    def next_index(self, n: int) -> int:
        return self._random.randrange(n)


default_source = SystemRandomSource()


def shuffle(items: Sequence[T], rng: Optional[RandomSource] = None) -> List[T]:
    """
    Return a uniformly random permutation of ``items``.

    Fisher-Yates over a copy: walks from the last index down to 1, swapping
    each position with an index drawn from [0, i]. The input is not mutated.

    Args:
        items: Sequence to permute.
        rng: Random source; defaults to ``SystemRandomSource``.

    Returns:
        A new list holding the same elements in random order.
    """
    rng = rng or default_source
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.next_index(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def sample(
    items: Sequence[T], k: int, rng: Optional[RandomSource] = None
) -> List[T]:
    """Pick up to ``k`` elements uniformly without replacement."""
    if k <= 0:
        return []
    return shuffle(items, rng)[:k]
