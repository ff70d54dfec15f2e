import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import numpy as np
import tsplib95


NO_TOUR = "NONE"


@dataclass
class Instance:
    name: str
    path: Optional[Path]
    distances: np.ndarray
    coords: Optional[np.ndarray] = None
    optimal_tour: Optional[List[int]] = None

    @property
    def dimension(self) -> int:
        return len(self.distances)


def euclidean_distance_matrix(coords) -> np.ndarray:
    # TSPLIB convention: distances are rounded to the nearest integer.
    pts = np.asarray(coords, dtype=float).reshape(-1, 2)
    diff = pts[:, None, :] - pts[None, :, :]
    return np.rint(np.sqrt((diff ** 2).sum(axis=-1))).astype(np.int64)


def random_instance(n: int, rng: Optional[random.Random] = None, scale: int = 1000) -> Instance:
    rng = rng or random.Random()
    coords = np.array([[rng.randint(0, scale), rng.randint(0, scale)] for _ in range(n)], dtype=float)
    return Instance(
        name=f"random{n}",
        path=None,
        distances=euclidean_distance_matrix(coords),
        coords=coords,
    )


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _node_coords(problem, nodes: List[int]) -> Optional[np.ndarray]:
    coords = problem.node_coords or problem.display_data
    if not coords or any(node not in coords for node in nodes):
        return None
    return np.array([list(coords[node])[:2] for node in nodes], dtype=float)


def load_tour(path: Path, node_index: Dict[int, int]) -> List[int]:
    tour_file = tsplib95.parse(Path(path).read_text())
    if not tour_file.tours:
        raise ValueError(f"{path} contains no tour")
    try:
        return [node_index[node] for node in tour_file.tours[0]]
    except KeyError as exc:
        raise ValueError(f"{path} visits unknown node {exc.args[0]}") from exc


def _find_tour(path: Path) -> Optional[Path]:
    for candidate in _solution_candidates(path):
        if candidate.exists():
            return candidate
    return None


def load_instance(path: Union[str, Path], tour_path: Union[str, Path, None] = None) -> Instance:
    path = Path(path)
    problem = tsplib95.load(path)
    nodes = list(problem.get_nodes())
    node_index = {node: i for i, node in enumerate(nodes)}
    n = len(nodes)
    distances = np.zeros((n, n), dtype=np.int64)
    for i, a in enumerate(nodes):
        for j, b in enumerate(nodes):
            if i != j:
                distances[i, j] = problem.get_weight(a, b)

    if tour_path is None:
        tour_path = _find_tour(path)
    elif str(tour_path) == NO_TOUR:
        tour_path = None
    optimal = load_tour(Path(tour_path), node_index) if tour_path is not None else None

    return Instance(
        name=problem.name or path.stem,
        path=path,
        distances=distances,
        coords=_node_coords(problem, nodes),
        optimal_tour=optimal,
    )
