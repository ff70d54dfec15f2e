import math
import random
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from .solvers.base import Tour, as_distance_matrix
from .solvers.crossover import breed
from .solvers.neighbors import NeighborIndex


@dataclass
class EvolutionConfig:
    population_size: int = 100
    mutation_rate: float = 0.01
    max_generation: int = 50
    parent_ratio: float = 0.5
    persist_ratio: float = 0.05
    sample_size: int = 2
    random_seed: Optional[int] = 123

    def __post_init__(self):
        if self.population_size < 1:
            raise ValueError(f"population_size must be positive, got {self.population_size}")
        if self.sample_size < 1:
            raise ValueError(f"sample_size must be positive, got {self.sample_size}")
        for name in ("mutation_rate", "parent_ratio", "persist_ratio"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


class GeneticSolver:
    """
    Generational GA over tours of a fixed instance.

    Each step keeps the fittest tours, picks parents by tournament, breeds
    children through the union-graph nearest-neighbor crossover and then
    mutates a random share of the new population.
    """

    def __init__(
        self,
        dist,
        config: Optional[EvolutionConfig] = None,
        rng: Optional[random.Random] = None,
        nearest: Optional[NeighborIndex] = None,
    ):
        self.cfg = config or EvolutionConfig()
        self.dist = as_distance_matrix(dist)
        self.n = len(self.dist)
        self.rng = rng or random.Random(self.cfg.random_seed)
        # Precomputing every city's ranking keeps the crossover fallback cheap.
        self.nearest = nearest or NeighborIndex.from_matrix(self.dist)
        self.generation = 0
        self.population: List[Tour] = []

    @property
    def initialized(self) -> bool:
        return self.generation > 0

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise RuntimeError("solver is not initialized; call initialize() first")

    def initialize(self, popsize: Optional[int] = None) -> None:
        popsize = self.cfg.population_size if popsize is None else popsize
        if popsize < 1:
            raise ValueError(f"popsize must be positive, got {popsize}")
        self.population = self.init_population(popsize)
        self.generation = 1

    def init_population(self, popsize: int) -> List[Tour]:
        cities = list(range(self.n))
        pop = []
        for _ in range(popsize):
            self.rng.shuffle(cities)
            pop.append(Tour(cities, self.dist))
        return pop

    def get_generation(self) -> int:
        return self.generation

    def fittest_individual(self) -> Tour:
        self._require_initialized()
        return min(self.population)

    def n_fittest(self, k: int) -> List[Tour]:
        self._require_initialized()
        if not 0 <= k <= len(self.population):
            raise ValueError(f"k must be within [0, {len(self.population)}], got {k}")
        return sorted(self.population)[:k]

    def avg_fitness(self) -> int:
        self._require_initialized()
        total = sum(t.length for t in self.population)
        return round_half_up(total / len(self.population))

    def should_continue(self) -> bool:
        return self.generation <= self.cfg.max_generation

    def step(self) -> None:
        self._require_initialized()
        popsize = self.cfg.population_size

        n_persisters = round_half_up(popsize * self.cfg.persist_ratio)
        persisters = self.n_fittest(min(n_persisters, len(self.population)))

        n_parents = max(1, round_half_up(popsize * self.cfg.parent_ratio))
        parents = self.tournament_select(self.population, n_parents)

        n_children = popsize - len(persisters)
        children = self.breed_population(parents, n_children)

        self.population = persisters + children
        self.mutate_population(self.population)
        self.generation += 1

    def tournament_select(self, population: List[Tour], number: int) -> List[Tour]:
        fittest = []
        while len(fittest) < number:
            fittest.append(min(self.sample(population, self.cfg.sample_size)))
        return fittest

    def sample(self, population: List[Tour], number: int) -> List[Tour]:
        return [self.rng.choice(population) for _ in range(number)]

    def breeding_pool(self, parents: List[Tour], n_children: int) -> List[Tour]:
        size = 2 * n_children
        if size == 0:
            return []
        passes = math.ceil(size / len(parents))
        pool: List[Tour] = []
        for _ in range(passes):
            shuffled = parents[:]
            self.rng.shuffle(shuffled)
            pool.extend(shuffled)
        pool = pool[:size]
        self.rng.shuffle(pool)
        return pool

    def breed_population(self, parents: List[Tour], n_children: int) -> List[Tour]:
        pool = self.breeding_pool(parents, n_children)
        children = []
        for i in range(0, len(pool) - 1, 2):
            children.append(breed(pool[i], pool[i + 1], self.dist, self.nearest, self.rng))
        return children

    def mutate_population(self, tours: List[Tour]) -> None:
        for tour in tours:
            if self.rng.random() < self.cfg.mutation_rate:
                tour.mutate(self.rng)

    def to_state(self) -> Dict:
        version, internal, gauss = self.rng.getstate()
        return {
            "cfg": asdict(self.cfg),
            "generation": self.generation,
            "population": [t.cities for t in self.population],
            "rng_state": [version, list(internal), gauss],
        }

    @classmethod
    def from_state(cls, state: Dict, dist) -> "GeneticSolver":
        cfg = EvolutionConfig(**state["cfg"])
        solver = cls(dist, cfg)
        solver.generation = state.get("generation", 0)
        population = state.get("population", [])
        for cities in population:
            if len(cities) != solver.n:
                raise ValueError(
                    f"checkpoint tours visit {len(cities)} cities, instance has {solver.n}"
                )
        solver.population = [Tour(cities, solver.dist) for cities in population]
        rng_state = state.get("rng_state")
        if rng_state:
            version, internal, gauss = rng_state
            solver.rng.setstate((version, tuple(internal), gauss))
        return solver


def new_solver(
    distance_matrix,
    config: Optional[EvolutionConfig] = None,
    rng: Optional[random.Random] = None,
) -> GeneticSolver:
    return GeneticSolver(distance_matrix, config=config, rng=rng)
