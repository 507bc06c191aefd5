"""Spectral analysis of dual graphs."""

from .analyzer import (
    build_laplacian,
    display_eigenvalues,
    eigendecomposition,
    eigenvalues,
    fiedler_partition,
    graph_fiedler_partition,
    graph_laplacian,
    spectrum,
)

__all__ = [
    "build_laplacian",
    "display_eigenvalues",
    "eigendecomposition",
    "eigenvalues",
    "fiedler_partition",
    "graph_fiedler_partition",
    "graph_laplacian",
    "spectrum",
]
