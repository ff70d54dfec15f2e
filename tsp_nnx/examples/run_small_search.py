import random

from tsp_nnx.data import random_instance
from tsp_nnx.evolutionary import EvolutionConfig, new_solver


def main():
    rng = random.Random(7)
    instance = random_instance(40, rng=rng)

    cfg = EvolutionConfig(
        population_size=30,
        mutation_rate=0.05,
        max_generation=20,
        random_seed=7,
    )
    solver = new_solver(instance.distances, config=cfg)
    solver.initialize()
    while solver.should_continue():
        best = solver.fittest_individual()
        print(f"gen {solver.get_generation()}: best={best.length} avg={solver.avg_fitness()}")
        solver.step()
    print(f"final best: {solver.fittest_individual()}")


if __name__ == "__main__":
    main()
