from .base import InvalidTourError, SolveResult, Tour, as_distance_matrix, tour_length
from .crossover import UnionGraph, breed, tour_edges
from .neighbors import NeighborIndex

__all__ = [
    "InvalidTourError",
    "SolveResult",
    "Tour",
    "as_distance_matrix",
    "tour_length",
    "UnionGraph",
    "breed",
    "tour_edges",
    "NeighborIndex",
]
