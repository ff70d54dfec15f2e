import random
from typing import Iterable, List, Optional

import networkx as nx
import numpy as np

from .base import Tour
from .neighbors import NeighborIndex


def tour_edges(tour: Tour) -> Iterable[tuple]:
    n = tour.n_cities
    for i in range(n):
        yield tour.cities[i], tour.cities[(i + 1) % n]


class UnionGraph:
    """
    Undirected graph holding the edges of two parent tours.

    A child is grown by a nearest-neighbor walk that prefers union edges and
    only steps into the complete graph (via the NeighborIndex) at dead ends.
    """

    def __init__(self, graph: nx.Graph, dist: np.ndarray, nearest: NeighborIndex):
        self.graph = graph
        self.dist = dist
        self.nearest = nearest

    @classmethod
    def union(cls, p1: Tour, p2: Tour, dist: np.ndarray, nearest: NeighborIndex) -> "UnionGraph":
        if p1.n_cities != p2.n_cities:
            raise ValueError(
                f"parents must visit the same cities ({p1.n_cities} != {p2.n_cities})"
            )
        graph = nx.Graph()
        graph.add_nodes_from(range(p1.n_cities))
        graph.add_edges_from(tour_edges(p1))
        graph.add_edges_from(tour_edges(p2))
        return cls(graph, dist, nearest)

    @property
    def n(self) -> int:
        return self.graph.number_of_nodes()

    def candidates(self, city: int) -> List[int]:
        return sorted(self.graph.neighbors(city), key=lambda c: (self.dist[city, c], c))

    def nna(self, rng: random.Random, start: Optional[int] = None) -> Tour:
        n = self.n
        if n == 0:
            return Tour([], self.dist)
        current = rng.randrange(n) if start is None else start
        path = [current]
        visited = {current}
        while len(path) < n:
            nxt = self._next_city(current, visited)
            path.append(nxt)
            visited.add(nxt)
            current = nxt
        return Tour(path, self.dist)

    def _next_city(self, current: int, visited: set) -> int:
        for neighbor in self.candidates(current):
            if neighbor not in visited:
                return neighbor
        # Dead end in the union graph: use the complete graph.
        for neighbor in self.nearest[current]:
            if neighbor not in visited:
                return neighbor
        raise RuntimeError(f"no unvisited city reachable from {current}")

    def __repr__(self) -> str:
        return f"UnionGraph(n={self.n}, edges={self.graph.number_of_edges()})"


def breed(
    p1: Tour,
    p2: Tour,
    dist: np.ndarray,
    nearest: NeighborIndex,
    rng: random.Random,
    start: Optional[int] = None,
) -> Tour:
    return UnionGraph.union(p1, p2, dist, nearest).nna(rng, start=start)
