import argparse
import json
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional

from tsp_nnx.data import Instance, load_instance
from tsp_nnx.evaluation import GenerationStats, best_result, snapshot, summarize_history
from tsp_nnx.evolutionary import EvolutionConfig, GeneticSolver, new_solver
from tsp_nnx.solvers.base import Tour


CHECKPOINT_PATH = Path("checkpoints/solver_state.json")
QUIT = "q"


def save_checkpoint(solver: GeneticSolver, path: Path = CHECKPOINT_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(solver.to_state()))


def load_checkpoint(dist, path: Path = CHECKPOINT_PATH) -> GeneticSolver:
    state = json.loads(path.read_text())
    return GeneticSolver.from_state(state, dist)


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def config_from_args(args) -> EvolutionConfig:
    return EvolutionConfig(
        population_size=args.population_size,
        mutation_rate=args.mutation_rate,
        max_generation=args.max_generation,
        parent_ratio=args.parent_ratio,
        persist_ratio=args.persist_ratio,
        sample_size=args.sample_size,
        random_seed=args.seed,
    )


def build_solver(instance: Instance, cfg: EvolutionConfig, resume: bool, checkpoint: Path) -> GeneticSolver:
    if resume and checkpoint.exists():
        log(f"resuming from {checkpoint}")
        solver = load_checkpoint(instance.distances, checkpoint)
        # Only the horizon may be extended; the rest of the run keeps its saved config.
        solver.cfg = replace(solver.cfg, max_generation=cfg.max_generation)
        return solver
    log("starting new population")
    solver = new_solver(instance.distances, config=cfg)
    solver.initialize()
    return solver


def _make_plotter(instance: Instance, reference: Optional[Tour]):
    if instance.coords is None:
        log(f"{instance.name} has no coordinates; plotting disabled")
        return None
    from tsp_nnx.plotting import TourPlotter

    plotter = TourPlotter(f"TSPLIB Instance {instance.name}", instance.coords, interactive=True)
    if reference is not None:
        plotter.add_optimal_path(reference)
    return plotter


def run(args, input_fn: Callable[[str], str] = input) -> List[GenerationStats]:
    t0 = time.perf_counter()
    log(f"loading {args.problem}")
    instance = load_instance(Path(args.problem), args.tour)
    reference = Tour(instance.optimal_tour, instance.distances) if instance.optimal_tour else None
    log(
        f"loaded {instance.name} ({instance.dimension} cities) in {time.perf_counter() - t0:.2f}s"
        + (f", reference length {reference.length}" if reference else "")
    )
    optimum = reference.length if reference else None

    cfg = config_from_args(args)
    checkpoint = Path(args.checkpoint)
    plotter = _make_plotter(instance, reference) if args.plot else None

    if not args.auto and input_fn(f"Enter anything to start, or '{QUIT}' to exit: ").strip().lower() == QUIT:
        return []

    solver = build_solver(instance, cfg, args.resume, checkpoint)
    history: List[GenerationStats] = []
    while solver.should_continue():
        stats = snapshot(solver, optimum)
        history.append(stats)
        if plotter is not None:
            plotter.show_tour(solver.fittest_individual(), stats.generation)
        msg = (
            f"Generation {stats.generation}/{solver.cfg.max_generation} "
            f"had average length {stats.avg_length} (best {stats.best_length})"
        )
        if args.auto:
            log(msg)
        elif input_fn(f"{msg}. Enter anything to continue, or '{QUIT}' to exit: ").strip().lower() == QUIT:
            break
        solver.step()
        save_checkpoint(solver, checkpoint)

    result = best_result(solver, optimum)
    summary = summarize_history(history)
    log(f"The best solution found was: {result.tour}")
    if optimum is not None:
        log(f"gap to reference: {result.gap:.2%}")
    log(f"improved best length by {summary['improvement']:.2%} over {summary['generations']} generations")
    if plotter is not None and args.save_plot:
        plotter.save(args.save_plot)
    return history


def inspect(args) -> None:
    checkpoint = Path(args.checkpoint)
    if not checkpoint.exists():
        print(f"No checkpoint found at {checkpoint}; run `tsp-nnx run` first.")
        return
    instance = load_instance(Path(args.problem), args.tour)
    solver = load_checkpoint(instance.distances, checkpoint)
    best = solver.fittest_individual()
    print(f"generation={solver.get_generation()}, best_length={best.length}, avg_length={solver.avg_fitness()}")
    print(f"best tour: {best.cities}")


def build_parser() -> argparse.ArgumentParser:
    defaults = EvolutionConfig()
    parser = argparse.ArgumentParser(description="Genetic TSP solver with nearest-neighbor crossover")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Evolve tours for a TSPLIB instance, one generation per prompt")
    run_parser.add_argument("problem", help="TSPLIB .tsp file")
    run_parser.add_argument("--tour", default=None, help="reference .opt.tour file, or NONE")
    run_parser.add_argument("--auto", action="store_true", help="step generations without prompting")
    run_parser.add_argument("--plot", action="store_true", help="show the best tour every generation")
    run_parser.add_argument("--save-plot", default=None, help="write the final plot to this file")
    run_parser.add_argument("--checkpoint", default=str(CHECKPOINT_PATH))
    run_parser.add_argument("--resume", action="store_true", help="continue from --checkpoint if it exists")
    run_parser.add_argument("--population-size", type=int, default=defaults.population_size)
    run_parser.add_argument("--mutation-rate", type=float, default=defaults.mutation_rate)
    run_parser.add_argument("--max-generation", type=int, default=defaults.max_generation)
    run_parser.add_argument("--parent-ratio", type=float, default=defaults.parent_ratio)
    run_parser.add_argument("--persist-ratio", type=float, default=defaults.persist_ratio)
    run_parser.add_argument("--sample-size", type=int, default=defaults.sample_size)
    run_parser.add_argument("--seed", type=int, default=defaults.random_seed)
    run_parser.set_defaults(func=run)

    inspect_parser = subparsers.add_parser("inspect", help="Inspect a saved checkpoint")
    inspect_parser.add_argument("checkpoint")
    inspect_parser.add_argument("problem", help="TSPLIB .tsp file the checkpoint was made for")
    inspect_parser.add_argument("--tour", default="NONE")
    inspect_parser.set_defaults(func=inspect)
    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
