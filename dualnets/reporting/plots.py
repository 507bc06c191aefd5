"""Headless-safe plotting adapters."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from ..core.types import DualGraph, SampleResult


def _pyplot():
    import matplotlib

    matplotlib.use("Agg", force=True)
    import matplotlib.pyplot as plt  # imported lazily for headless safety

    return plt


class LossPlotAdapter:
    """Collect step losses and optionally emit a matplotlib curve."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: List[Tuple[int, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_step(self, step: int, metrics):
        if not self.enable_plots:
            return
        self._history.append((step, float(metrics.get("loss", 0.0))))

    def close(self) -> str | None:
        if not self.enable_plots or not self._history:
            return None
        plt = _pyplot()
        steps, losses = zip(*self._history)
        fig, ax = plt.subplots()
        ax.plot(steps, losses)
        ax.set_xlabel("Step")
        ax.set_ylabel("Loss")
        ax.set_title("Training Curve")
        plot_path = self.run_dir / "loss.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return str(plot_path)

    __call__ = on_step


def plot_regions(result: SampleResult, graph: DualGraph, path: str | Path) -> str:
    """Draw the region map with the dual graph overlaid, in pixel space."""

    plt = _pyplot()
    size = result.canvas_size
    cell = -(-size // result.resolution)
    fig, ax = plt.subplots(figsize=(5, 5))
    for region in result.ordered():
        for point in region.points:
            ax.add_patch(
                plt.Rectangle((point.px, point.py), cell, cell, color=region.color, linewidth=0)
            )
    lookup = {vertex.id: vertex for vertex in graph.vertices}
    for a, b in graph.edges:
        ax.plot([lookup[a].x, lookup[b].x], [lookup[a].y, lookup[b].y], color="#666", linewidth=1.5)
    for vertex in graph.vertices:
        ax.scatter([vertex.x], [vertex.y], s=40, c=vertex.color, edgecolors="black", zorder=3)
    ax.set_xlim(0, size)
    ax.set_ylim(size, 0)
    ax.set_aspect("equal")
    ax.set_title(f"{result.count} regions, {len(graph.edges)} edges")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path)
    plt.close(fig)
    return str(path)


__all__ = ["LossPlotAdapter", "plot_regions"]
