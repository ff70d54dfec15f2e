from typing import Callable, Dict, Iterator, Tuple

import numpy as np


DistanceFn = Callable[[int, int], int]


class NeighborIndex:
    """
    Every city's other cities, nearest first.

    Built once per instance and shared read-only by every crossover, so the
    nearest-neighbor walk can fall back to it without re-sorting.
    """

    def __init__(self, ranked: Dict[int, Tuple[int, ...]]):
        self._ranked = ranked

    @classmethod
    def build(cls, n: int, distance_fn: DistanceFn) -> "NeighborIndex":
        if n < 0:
            raise ValueError(f"number of cities must be non-negative, got {n}")
        ranked = {}
        for city in range(n):
            others = [c for c in range(n) if c != city]
            others.sort(key=lambda c: (distance_fn(city, c), c))
            ranked[city] = tuple(others)
        return cls(ranked)

    @classmethod
    def from_matrix(cls, dist: np.ndarray) -> "NeighborIndex":
        return cls.build(len(dist), lambda a, b: int(dist[a, b]))

    def __getitem__(self, city: int) -> Tuple[int, ...]:
        return self._ranked[city]

    def __len__(self) -> int:
        return len(self._ranked)

    def __iter__(self) -> Iterator[int]:
        return iter(self._ranked)
