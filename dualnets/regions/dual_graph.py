"""Build the dual graph of sampled decision regions."""

from __future__ import annotations

import logging
from typing import Iterable, List, Set, Tuple

from ..core.types import DualGraph, Region, SampleResult, Vertex
from .sampler import hamming_distance

_log = logging.getLogger(__name__)


def build_dual_graph(regions: SampleResult | Iterable[Region]) -> DualGraph:
    """Connect every pair of regions whose signatures differ in one bit.

    Vertices sit at the pixel centroid of their region and are ordered by
    region id.  Signatures of different lengths never connect.  The pair
    scan is quadratic in the number of regions.
    """

    ordered: List[Region] = (
        regions.ordered()
        if isinstance(regions, SampleResult)
        else sorted(regions, key=lambda region: region.id)
    )
    vertices = []
    for region in ordered:
        if not region.points:
            raise ValueError(f"Region {region.id} has no sampled points")
        cx, cy = region.centroid
        vertices.append(
            Vertex(id=region.id, x=cx, y=cy, color=region.color, signature=region.signature)
        )

    edges: Set[Tuple[int, int]] = set()
    for idx, first in enumerate(ordered):
        for second in ordered[idx + 1 :]:
            if hamming_distance(first.signature, second.signature) == 1:
                edges.add((min(first.id, second.id), max(first.id, second.id)))

    _log.debug("Dual graph created with %d nodes and %d edges", len(vertices), len(edges))
    return DualGraph(vertices=tuple(vertices), edges=tuple(sorted(edges)))


__all__ = ["build_dual_graph"]
