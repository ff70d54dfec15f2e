import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np


class InvalidTourError(AssertionError):
    """Raised when a tour is not a permutation of its cities."""


def as_distance_matrix(matrix) -> np.ndarray:
    dist = np.asarray(matrix)
    if dist.size == 0:
        return np.zeros((0, 0), dtype=np.int64)
    if dist.ndim != 2 or dist.shape[0] != dist.shape[1]:
        raise ValueError(f"distance matrix must be square, got shape {dist.shape}")
    if (dist < 0).any():
        raise ValueError("distance matrix must be non-negative")
    return np.rint(dist).astype(np.int64)


def tour_length(dist: np.ndarray, tour: Sequence[int]) -> int:
    if len(tour) == 0:
        return 0
    idx = np.asarray(tour, dtype=np.int64)
    return int(dist[idx, np.roll(idx, -1)].sum())


class Tour:
    """
    A cyclic ordering of every city in ``[0, n)`` with its cached length.

    Tours order by length, so ``min`` and ``sorted`` give the fittest first.
    """

    __slots__ = ("cities", "n_cities", "length", "_dist")

    def __init__(self, cities: Sequence[int], dist: np.ndarray):
        self.cities: List[int] = [int(c) for c in cities]
        self.n_cities = len(self.cities)
        self._dist = dist
        if self.n_cities != len(dist):
            raise InvalidTourError(f"tour visits {self.n_cities} cities, instance has {len(dist)}")
        if not self.is_valid():
            raise InvalidTourError(f"not a permutation of 0..{self.n_cities - 1}: {self.cities}")
        self.length = self.evaluate()

    def evaluate(self) -> int:
        return tour_length(self._dist, self.cities)

    def is_valid(self) -> bool:
        return sorted(self.cities) == list(range(self.n_cities))

    def mutate(self, rng: random.Random) -> None:
        if self.n_cities == 0:
            return
        c1 = rng.randrange(self.n_cities)
        c2 = rng.randrange(self.n_cities)
        # Tours are cycles over a symmetric matrix, so wraparound is not needed.
        low, high = min(c1, c2), max(c1, c2)
        self.cities[low : high + 1] = reversed(self.cities[low : high + 1])
        self.length = self.evaluate()

    def copy(self) -> "Tour":
        return Tour(self.cities, self._dist)

    def __lt__(self, other: "Tour") -> bool:
        return self.length < other.length

    def __len__(self) -> int:
        return self.n_cities

    def __iter__(self):
        return iter(self.cities)

    def __repr__(self) -> str:
        return f"Tour(cities={self.cities}, length={self.length})"


@dataclass
class SolveResult:
    tour: Tour
    length: int
    solver_name: str
    optimum: Optional[float] = None

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum
