"""Laplacian spectra and Fiedler bipartitions of dual graphs."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import numpy as np

from ..core.errors import DecompositionError, EmptyGraph, InsufficientVertices
from ..core.linalg import (
    adjacency_matrix,
    as_square_matrix,
    eigenvalues_2x2,
    jacobi_eigh,
    laplacian_matrix,
)
from ..core.types import Array, DualGraph, FiedlerPartition, Spectrum, Vertex

ZERO_CLAMP = 1e-10
DISPLAY_DECIMALS = 6

VertexLike = Vertex | int


def _vertex_ids(vertices: Sequence[VertexLike]) -> List[int]:
    return [int(getattr(vertex, "id", vertex)) for vertex in vertices]


def _clamp(value: float) -> float:
    return 0.0 if abs(value) < ZERO_CLAMP else float(value)


def build_laplacian(
    vertices: Sequence[VertexLike], edges: Iterable[Tuple[int, int]]
) -> Array:
    """``L = D - A`` with rows ordered like ``vertices``.

    Edges are given by vertex id; pairs naming unknown ids are ignored.
    """

    ids = _vertex_ids(vertices)
    if not ids:
        raise EmptyGraph("Cannot build a Laplacian for a graph without vertices")
    index_of = {vertex_id: idx for idx, vertex_id in enumerate(ids)}
    n = len(ids)
    pairs = [
        (index_of.get(int(a), n), index_of.get(int(b), n))
        for a, b in edges
    ]
    return laplacian_matrix(adjacency_matrix(n, pairs))


def graph_laplacian(graph: DualGraph) -> Array:
    return build_laplacian(graph.vertices, graph.edges)


def eigenvalues(matrix: Sequence[Sequence[float]] | Array) -> Tuple[float, ...]:
    """Eigenvalues of a symmetric matrix, ascending, near-zeros clamped to 0."""

    A = as_square_matrix(matrix)
    n = A.shape[0]
    if n == 1:
        raw = [float(A[0, 0])]
    elif n == 2:
        raw = eigenvalues_2x2(A)
    else:
        values, _ = jacobi_eigh(A)
        raw = values.tolist()
    if len(raw) != n or not all(np.isfinite(raw)):
        raise DecompositionError(f"Solver returned malformed eigenvalues: {raw}")
    return tuple(sorted(_clamp(value) for value in raw))


def display_eigenvalues(values: Iterable[float]) -> List[float]:
    """Presentation rounding; never feed the result back into comparisons."""

    return [round(float(value), DISPLAY_DECIMALS) for value in values]


def eigendecomposition(matrix: Sequence[Sequence[float]] | Array) -> Spectrum:
    """Eigenvalues with matching eigenvector columns.

    ``(value, column)`` pairs are sorted together; the returned
    ``Spectrum.order`` maps each sorted position back to its column.
    """

    A = as_square_matrix(matrix)
    values, vectors = jacobi_eigh(A)
    n = A.shape[0]
    if values.shape != (n,) or vectors.shape != (n, n):
        raise DecompositionError(
            f"Solver returned values {values.shape} and vectors {vectors.shape} for n={n}"
        )
    order = sorted(range(n), key=lambda k: (values[k], k))
    return Spectrum(
        values=tuple(_clamp(values[k]) for k in order),
        vectors=vectors,
        order=tuple(order),
    )


def spectrum(graph: DualGraph, *, with_vectors: bool = False) -> Spectrum:
    """Laplacian spectrum of ``graph``."""

    laplacian = graph_laplacian(graph)
    if with_vectors:
        return eigendecomposition(laplacian)
    return Spectrum(values=eigenvalues(laplacian))


def fiedler_partition(
    vertices: Sequence[VertexLike], edges: Iterable[Tuple[int, int]]
) -> FiedlerPartition:
    """Split vertices by the sign of the Fiedler vector.

    Zero entries count as non-negative.  The solver normalises each
    eigenvector so its largest-magnitude entry is positive; when the
    second-smallest eigenvalue is repeated the column that sorts first
    by solver index is used.
    """

    laplacian = build_laplacian(vertices, edges)
    ids = _vertex_ids(vertices)
    if len(ids) < 2:
        raise InsufficientVertices(
            f"Fiedler partition needs at least 2 vertices, got {len(ids)}"
        )
    result = eigendecomposition(laplacian)
    vector = result.vector(1)
    non_negative = tuple(vid for vid, entry in zip(ids, vector) if entry >= 0)
    negative = tuple(vid for vid, entry in zip(ids, vector) if entry < 0)
    return FiedlerPartition(
        non_negative=non_negative,
        negative=negative,
        value=result.values[1],
        vector=tuple(float(entry) for entry in vector),
    )


def graph_fiedler_partition(graph: DualGraph) -> FiedlerPartition:
    return fiedler_partition(graph.vertices, graph.edges)


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
