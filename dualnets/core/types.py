"""Core typing contracts for DualNets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

Array = np.ndarray
Signature = Tuple[int, ...]
Gradients = Dict[str, Array]


@dataclass(frozen=True)
class Example:
    """A single training example."""

    inputs: Tuple[float, ...]
    targets: Tuple[float, ...]

    def to_dict(self) -> Dict[str, List[float]]:
        return {"inputs": list(self.inputs), "targets": list(self.targets)}


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward network architecture."""

    layer_dims: List[int]


@dataclass
class NetworkState:
    """Deep-copied parameters and activation trace of a network.

    ``activations`` holds one vector per layer (input through output) and
    ``z_values`` one pre-activation vector per transition.  Both are empty
    when the snapshot was taken before any forward pass.
    """

    architecture: List[int]
    weights: List[Array]
    biases: List[Array]
    activations: List[Array] = field(default_factory=list)
    z_values: List[Array] = field(default_factory=list)

    def copy(self) -> "NetworkState":
        return NetworkState(
            architecture=list(self.architecture),
            weights=[w.copy() for w in self.weights],
            biases=[b.copy() for b in self.biases],
            activations=[a.copy() for a in self.activations],
            z_values=[z.copy() for z in self.z_values],
        )


@dataclass(frozen=True)
class Bounds:
    """Rectangular view of the input plane."""

    x_min: float = -3.0
    x_max: float = 3.0
    y_min: float = -3.0
    y_max: float = 3.0

    def __post_init__(self) -> None:
        if not self.x_max > self.x_min or not self.y_max > self.y_min:
            raise ValueError(
                f"Bounds must satisfy x_min < x_max and y_min < y_max, got {self}"
            )

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def pan(self, dx: float, dy: float) -> "Bounds":
        return Bounds(self.x_min + dx, self.x_max + dx, self.y_min + dy, self.y_max + dy)

    def zoom(self, factor: float, centre: Tuple[float, float] | None = None) -> "Bounds":
        """Zoom by ``factor`` (>1 zooms in) keeping ``centre`` fixed."""

        if factor <= 0:
            raise ValueError(f"Zoom factor must be positive, got {factor}")
        cx, cy = centre if centre is not None else (
            (self.x_min + self.x_max) / 2.0,
            (self.y_min + self.y_max) / 2.0,
        )
        new_width = self.width / factor
        new_height = self.height / factor
        x_min = cx - (cx - self.x_min) * (new_width / self.width)
        y_min = cy - (cy - self.y_min) * (new_height / self.height)
        return Bounds(x_min, x_min + new_width, y_min, y_min + new_height)


@dataclass(frozen=True)
class GridPoint:
    """One sampled grid cell."""

    px: int
    py: int
    x: float
    y: float


@dataclass
class Region:
    """Sampled inputs sharing one hidden-layer activation signature."""

    id: int
    signature: Signature
    color: str
    points: List[GridPoint] = field(default_factory=list)

    @property
    def centroid(self) -> Tuple[float, float]:
        """Mean pixel position of the region's cells."""

        n = len(self.points)
        return (
            sum(p.px for p in self.points) / n,
            sum(p.py for p in self.points) / n,
        )

    @property
    def real_centroid(self) -> Tuple[float, float]:
        n = len(self.points)
        return (
            sum(p.x for p in self.points) / n,
            sum(p.y for p in self.points) / n,
        )


@dataclass(frozen=True)
class SampleResult:
    """Output of a region sampling pass."""

    regions: Dict[Signature, Region]
    bounds: Bounds
    resolution: int
    canvas_size: int

    @property
    def count(self) -> int:
        return len(self.regions)

    def ordered(self) -> List[Region]:
        return sorted(self.regions.values(), key=lambda region: region.id)


@dataclass(frozen=True)
class Vertex:
    """Dual-graph vertex standing for one region."""

    id: int
    x: float
    y: float
    color: str
    signature: Signature


@dataclass(frozen=True)
class Neighbor:
    """Signature found one bit away from a probed input."""

    signature: Signature
    input_index: int
    variation: float
    inputs: Tuple[float, ...]


@dataclass(frozen=True)
class Spectrum:
    """Laplacian spectrum.

    ``values`` is sorted ascending; ``vectors`` keeps the solver's column
    order and ``order[k]`` is the column holding the eigenvector of
    ``values[k]``.
    """

    values: Tuple[float, ...]
    vectors: Array | None = None
    order: Tuple[int, ...] = ()

    def vector(self, k: int) -> Array:
        if self.vectors is None:
            raise ValueError("Spectrum was computed without eigenvectors")
        return self.vectors[:, self.order[k]].copy()

    @property
    def connected_components(self) -> int:
        return sum(1 for value in self.values if value == 0.0)

    @property
    def spectral_gap(self) -> float:
        if len(self.values) < 3:
            return 0.0
        return max(0.0, self.values[2] - self.values[1])


@dataclass(frozen=True)
class FiedlerPartition:
    """Sign bipartition of the dual graph by its Fiedler vector."""

    non_negative: Tuple[int, ...]
    negative: Tuple[int, ...]
    value: float
    vector: Tuple[float, ...]


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`dualnets.pipelines.run_pipeline`."""

    steps: int
    regions: int
    edges: int
    snapshot_path: str
    graph_path: str
    spectrum_path: str
    metrics_path: str
    manifest_path: str


@dataclass(frozen=True)
class DualGraph:
    """Regions as vertices, Hamming-distance-1 signature pairs as edges.

    Edges are ``(low_id, high_id)`` pairs, sorted and unique.
    """

    vertices: Tuple[Vertex, ...]
    edges: Tuple[Tuple[int, int], ...]

    def adjacency_list(self) -> Dict[int, List[int]]:
        adj: Dict[int, List[int]] = {vertex.id: [] for vertex in self.vertices}
        for a, b in self.edges:
            adj[a].append(b)
            adj[b].append(a)
        return adj

    def neighbors(self, vertex_id: int) -> List[int]:
        adj = self.adjacency_list()
        if vertex_id not in adj:
            raise KeyError(f"Unknown vertex id: {vertex_id}")
        return sorted(adj[vertex_id])

    def edge_keys(self) -> List[str]:
        return [f"{a},{b}" for a, b in self.edges]
