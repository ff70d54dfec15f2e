"""
Shared instances and helpers for the solver tests.
"""

import random
from collections import Counter
from typing import List

import numpy as np

from tsp_nnx.data import euclidean_distance_matrix
from tsp_nnx.solvers.base import Tour, tour_length


UNIT_SQUARE = [(0, 0), (0, 1), (1, 1), (1, 0)]

SQUARE_TSP = """NAME: square4
TYPE: TSP
COMMENT: four corners of a square
DIMENSION: 4
EDGE_WEIGHT_TYPE: EUC_2D
NODE_COORD_SECTION
1 0 0
2 0 10
3 10 10
4 10 0
EOF
"""

SQUARE_TOUR = """NAME: square4.opt.tour
TYPE: TOUR
DIMENSION: 4
TOUR_SECTION
1
2
3
4
-1
EOF
"""


def line_matrix(n: int) -> np.ndarray:
    """Cities on a line at x = 0..n-1, so dist(i, j) = |i - j|."""
    idx = np.arange(n)
    return np.abs(np.subtract.outer(idx, idx)).astype(np.int64)


def random_matrix(n: int, seed: int = 0, scale: int = 100) -> np.ndarray:
    rng = random.Random(seed)
    coords = [(rng.randint(0, scale), rng.randint(0, scale)) for _ in range(n)]
    return euclidean_distance_matrix(coords)


def assert_permutation(testcase, tour: Tour, n: int) -> None:
    testcase.assertEqual(Counter(tour.cities), Counter(range(n)))
    testcase.assertTrue(tour.is_valid())


def assert_length_consistent(testcase, tour: Tour, dist: np.ndarray) -> None:
    testcase.assertEqual(tour.length, tour_length(dist, tour.cities))


class ScriptedRng(random.Random):
    """Random source whose ``randrange`` replays a fixed script."""

    def __init__(self, values: List[int]):
        super().__init__(0)
        self.values = list(values)

    def randrange(self, *args, **kwargs):
        return self.values.pop(0)
