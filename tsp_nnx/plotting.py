"""
Tour plots: cities as points, the reference tour dashed, the current best solid.
"""

from pathlib import Path
from typing import Optional, Sequence, Union

import matplotlib.pyplot as plt
import numpy as np

from .solvers.base import Tour


def closed_path(coords: np.ndarray, cities: Sequence[int]) -> np.ndarray:
    """Coordinates of ``cities`` in visiting order, with the first city repeated at the end."""
    if len(cities) == 0:
        return np.zeros((0, 2))
    order = list(cities) + [cities[0]]
    return coords[order]


class TourPlotter:
    def __init__(self, title: str, coords, interactive: bool = False, figsize=(8, 8)):
        self.title = title
        self.coords = np.asarray(coords, dtype=float).reshape(-1, 2)
        self.interactive = interactive
        self.fig, self.ax = plt.subplots(figsize=figsize)
        self.optimal_line = None
        self.tour_line = None

        self.ax.set_xticks([])
        self.ax.set_yticks([])
        self.ax.set_title(title)
        self.ax.scatter(self.coords[:, 0], self.coords[:, 1], c="red", s=20, zorder=3, label="Cities")
        if interactive:
            plt.ion()
            plt.show(block=False)

    def add_optimal_path(self, tour: Union[Tour, Sequence[int]], length: Optional[int] = None) -> None:
        cities = tour.cities if isinstance(tour, Tour) else list(tour)
        if length is None and isinstance(tour, Tour):
            length = tour.length
        pts = closed_path(self.coords, cities)
        label = "Optimal" if length is None else f"Optimal: {length}"
        (self.optimal_line,) = self.ax.plot(
            pts[:, 0], pts[:, 1], "g--", linewidth=1.5, alpha=0.8, zorder=1, label=label
        )
        self.ax.legend(loc="upper right")

    def show_tour(self, tour: Tour, generation: int) -> None:
        pts = closed_path(self.coords, tour.cities)
        label = f"Generation {generation}: {tour.length}"
        if self.tour_line is None:
            (self.tour_line,) = self.ax.plot(pts[:, 0], pts[:, 1], "b-", linewidth=2, zorder=2, label=label)
        else:
            self.tour_line.set_data(pts[:, 0], pts[:, 1])
            self.tour_line.set_label(label)
        self.ax.set_title(f"{self.title} (generation {generation})")
        self.ax.legend(loc="upper right")
        if self.interactive:
            self.fig.canvas.draw_idle()
            plt.pause(0.001)

    def save(self, path: Union[str, Path], dpi: int = 150) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(path, dpi=dpi, bbox_inches="tight")

    def close(self) -> None:
        plt.close(self.fig)
