"""
Genetic TSP solver whose crossover is a nearest-neighbor walk over the union of two parent tours.
"""

__all__ = [
    "data",
    "evaluation",
    "evolutionary",
    "plotting",
]
