from dataclasses import dataclass
from typing import Dict, List, Optional

from .evolutionary import GeneticSolver
from .solvers.base import SolveResult


@dataclass
class GenerationStats:
    generation: int
    best_length: int
    avg_length: int
    gap: float


def best_result(solver: GeneticSolver, optimum: Optional[float] = None) -> SolveResult:
    best = solver.fittest_individual()
    return SolveResult(
        tour=best,
        length=best.length,
        solver_name=solver.__class__.__name__,
        optimum=optimum,
    )


def snapshot(solver: GeneticSolver, optimum: Optional[float] = None) -> GenerationStats:
    result = best_result(solver, optimum)
    return GenerationStats(
        generation=solver.get_generation(),
        best_length=result.length,
        avg_length=solver.avg_fitness(),
        gap=result.gap,
    )


def summarize_history(history: List[GenerationStats]) -> Dict[str, float]:
    if not history:
        return {"generations": 0, "first_best": float("inf"), "last_best": float("inf"), "improvement": 0.0}
    first = history[0].best_length
    last = history[-1].best_length
    improvement = 0.0 if first == 0 else (first - last) / first
    return {
        "generations": len(history),
        "first_best": first,
        "last_best": last,
        "improvement": improvement,
    }
