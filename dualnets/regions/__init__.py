"""Decision-region discovery and the dual graph."""

from .dual_graph import build_dual_graph
from .sampler import (
    PALETTE,
    differing_bit,
    hamming_distance,
    is_neuron_active,
    probe_neighbors,
    regions_with_active,
    sample_regions,
)

__all__ = [
    "PALETTE",
    "build_dual_graph",
    "differing_bit",
    "hamming_distance",
    "is_neuron_active",
    "probe_neighbors",
    "regions_with_active",
    "sample_regions",
]
