"""Partition a 2D input window into regions of identical ReLU activation."""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Sequence

import numpy as np

from ..core.errors import UnsupportedInputDimension
from ..core.network import FeedForwardNetwork
from ..core.types import Bounds, GridPoint, Neighbor, Region, SampleResult, Signature

_log = logging.getLogger(__name__)

PALETTE = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FFEAA7",
    "#DDA0DD",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E9",
    "#F8C471",
    "#82E0AA",
    "#F1948A",
    "#AED6F1",
    "#A9DFBF",
    "#F9E79F",
)

DEFAULT_CANVAS = 300
PROBE_VARIATIONS = (-0.1, -0.05, -0.01, 0.01, 0.05, 0.1)


def region_color(region_id: int) -> str:
    return PALETTE[(region_id + 1) % len(PALETTE)]


def hamming_distance(a: Sequence[int], b: Sequence[int]) -> float:
    """Number of differing bits; ``inf`` when the lengths differ."""

    if len(a) != len(b):
        return math.inf
    return sum(1 for x, y in zip(a, b) if x != y)


def differing_bit(a: Sequence[int], b: Sequence[int]) -> int:
    """Index of the first differing bit, or -1."""

    for idx, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return idx
    return -1


def is_neuron_active(signature: Sequence[int], neuron: int) -> bool:
    if neuron < 0 or neuron >= len(signature):
        return False
    return signature[neuron] == 1


def require_planar(network: FeedForwardNetwork) -> None:
    if network.input_size != 2:
        raise UnsupportedInputDimension(
            f"Region sampling needs a 2-input network, got architecture {network.architecture}"
        )


def sample_regions(
    network: FeedForwardNetwork,
    bounds: Bounds | None = None,
    resolution: int = 50,
    *,
    canvas_size: int = DEFAULT_CANVAS,
) -> SampleResult:
    """Sample ``resolution**2`` grid cells and group them by signature.

    Cell ``(i, j)`` sits at ``x = x_min + i / resolution * width`` and
    ``y = y_min + j / resolution * height``; ``i`` is the outer loop, so
    region ids follow that traversal order.  Pixel coordinates put
    ``y_min`` at the bottom of a ``canvas_size`` square.  Only the
    network's activation trace is touched; it ends up holding the last
    cell's forward pass.
    """

    require_planar(network)
    if isinstance(resolution, bool) or int(resolution) != resolution or resolution <= 0:
        raise ValueError(f"Resolution must be a positive integer, got {resolution!r}")
    resolution = int(resolution)
    bounds = bounds or Bounds()

    regions: Dict[Signature, Region] = {}
    for i in range(resolution):
        x = bounds.x_min + (i / resolution) * bounds.width
        px = math.floor((i / resolution) * canvas_size)
        for j in range(resolution):
            y = bounds.y_min + (j / resolution) * bounds.height
            network.forward((x, y))
            signature = network.get_binary_state()
            region = regions.get(signature)
            if region is None:
                region_id = len(regions)
                region = Region(id=region_id, signature=signature, color=region_color(region_id))
                regions[signature] = region
            py = math.floor(((resolution - 1 - j) / resolution) * canvas_size)
            region.points.append(GridPoint(px=px, py=py, x=x, y=y))

    _log.debug("Sampled %d cells into %d regions", resolution * resolution, len(regions))
    return SampleResult(
        regions=regions, bounds=bounds, resolution=resolution, canvas_size=canvas_size
    )


def regions_with_active(result: SampleResult, neurons: Iterable[int]) -> List[int]:
    """Ids of regions in which every neuron in ``neurons`` is on."""

    wanted = list(neurons)
    return [
        region.id
        for region in result.ordered()
        if all(is_neuron_active(region.signature, neuron) for neuron in wanted)
    ]


def probe_neighbors(
    network: FeedForwardNetwork,
    inputs: Sequence[float],
    variations: Sequence[float] = PROBE_VARIATIONS,
) -> List[Neighbor]:
    """Find signatures one bit away by nudging each input coordinate.

    The trace is restored to ``forward(inputs)`` before returning.
    """

    base = np.asarray(inputs, dtype=np.float64)
    network.forward(base)
    current = network.get_binary_state()
    found: List[Neighbor] = []
    seen: set[Signature] = set()
    try:
        for idx in range(base.shape[0]):
            for variation in variations:
                probe = base.copy()
                probe[idx] += variation
                network.forward(probe)
                signature = network.get_binary_state()
                if hamming_distance(current, signature) == 1 and signature not in seen:
                    seen.add(signature)
                    found.append(
                        Neighbor(
                            signature=signature,
                            input_index=idx,
                            variation=float(variation),
                            inputs=tuple(float(v) for v in probe),
                        )
                    )
    finally:
        network.forward(base)
    return found


__all__ = [
    "PALETTE",
    "PROBE_VARIATIONS",
    "differing_bit",
    "hamming_distance",
    "is_neuron_active",
    "probe_neighbors",
    "region_color",
    "regions_with_active",
    "require_planar",
    "sample_regions",
]
