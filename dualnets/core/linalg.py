"""Dense linear-algebra primitives for graph spectra.

Eigenproblems of size one and two are solved in closed form; anything
larger goes through a cyclic Jacobi rotation solver for real symmetric
matrices.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .errors import DecompositionError
from .types import Array

_log = logging.getLogger(__name__)

JACOBI_TOLERANCE = 1e-12
JACOBI_MAX_SWEEPS = 100


def as_square_matrix(matrix: Sequence[Sequence[float]] | Array) -> Array:
    """Return ``matrix`` as a finite square float array."""

    try:
        arr = np.array(matrix, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise DecompositionError(f"Matrix is malformed: {exc}") from exc
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise DecompositionError(f"Matrix is not square: shape {arr.shape}")
    if arr.shape[0] == 0:
        raise DecompositionError("Empty matrix")
    if not np.all(np.isfinite(arr)):
        raise DecompositionError("Matrix contains non-finite entries")
    return arr


def eigenvalues_2x2(matrix: Sequence[Sequence[float]] | Array) -> List[float]:
    """Closed-form eigenvalues of a 2x2 matrix, ascending.

    A negative discriminant cannot arise for a symmetric matrix; if it
    does, both values fall back to the real part ``trace / 2``.
    """

    (a, b), (c, d) = np.asarray(matrix, dtype=np.float64)
    trace = a + d
    det = a * d - b * c
    disc = trace * trace - 4.0 * det
    if disc >= 0:
        root = math.sqrt(disc)
        return sorted([(trace + root) / 2.0, (trace - root) / 2.0])
    return [trace / 2.0, trace / 2.0]


def _canonical_signs(vectors: Array) -> Array:
    """Flip each column so its largest-magnitude entry is positive."""

    pivots = np.argmax(np.abs(vectors), axis=0)
    signs = np.sign(vectors[pivots, np.arange(vectors.shape[1])])
    signs[signs == 0] = 1.0
    return vectors * signs


def jacobi_eigh(
    matrix: Sequence[Sequence[float]] | Array,
    *,
    tol: float = JACOBI_TOLERANCE,
    max_sweeps: int = JACOBI_MAX_SWEEPS,
) -> Tuple[Array, Array]:
    """Eigen-decompose a real symmetric matrix with cyclic Jacobi sweeps.

    Returns ``(values, vectors)`` where ``vectors[:, k]`` belongs to
    ``values[k]``.  Values are in the solver's (diagonal) order, not
    sorted.  Raises :class:`DecompositionError` when the input is not
    symmetric or the sweeps fail to converge.
    """

    A = as_square_matrix(matrix)
    n = A.shape[0]
    scale = max(1.0, float(np.linalg.norm(A)))
    if not np.allclose(A, A.T, atol=1e-12 * scale):
        raise DecompositionError("Jacobi solver requires a symmetric matrix")
    A = (A + A.T) / 2.0
    V = np.eye(n)
    threshold = tol * scale

    for sweep in range(max_sweeps + 1):
        off = float(np.linalg.norm(A - np.diag(np.diag(A))))
        if off <= threshold:
            _log.debug("Jacobi converged after %d sweeps (n=%d)", sweep, n)
            return np.diag(A).copy(), _canonical_signs(V)
        if sweep == max_sweeps:
            break
        for p in range(n - 1):
            for q in range(p + 1, n):
                apq = A[p, q]
                if apq == 0.0:
                    continue
                theta = (A[q, q] - A[p, p]) / (2.0 * apq)
                sign = 1.0 if theta >= 0 else -1.0
                t = sign / (abs(theta) + math.sqrt(theta * theta + 1.0))
                c = 1.0 / math.sqrt(t * t + 1.0)
                s = t * c

                col_p = A[:, p].copy()
                col_q = A[:, q].copy()
                A[:, p] = c * col_p - s * col_q
                A[:, q] = s * col_p + c * col_q
                row_p = A[p, :].copy()
                row_q = A[q, :].copy()
                A[p, :] = c * row_p - s * row_q
                A[q, :] = s * row_p + c * row_q
                A[p, q] = A[q, p] = 0.0

                vec_p = V[:, p].copy()
                vec_q = V[:, q].copy()
                V[:, p] = c * vec_p - s * vec_q
                V[:, q] = s * vec_p + c * vec_q

    raise DecompositionError(
        f"Jacobi eigen-solver did not converge within {max_sweeps} sweeps (n={n})"
    )


def adjacency_matrix(n: int, edges: Iterable[Tuple[int, int]]) -> Array:
    """Symmetric 0/1 adjacency matrix with a zero diagonal.

    Edges referencing ids outside ``[0, n)`` and self-loops are ignored.
    """

    adj = np.zeros((n, n), dtype=np.float64)
    for i, j in edges:
        i, j = int(i), int(j)
        if 0 <= i < n and 0 <= j < n and i != j:
            adj[i, j] = 1.0
            adj[j, i] = 1.0
    return adj


def degree_vector(adjacency: Array) -> Array:
    return adjacency.sum(axis=1)


def laplacian_matrix(adjacency: Array) -> Array:
    """``L = D - A`` for an adjacency matrix ``A``."""

    return np.diag(degree_vector(adjacency)) - adjacency


__all__ = [
    "adjacency_matrix",
    "as_square_matrix",
    "degree_vector",
    "eigenvalues_2x2",
    "jacobi_eigh",
    "laplacian_matrix",
]
