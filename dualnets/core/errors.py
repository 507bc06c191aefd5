"""Error kinds raised by the DualNets core.

Every operation validates before it mutates, so a caller can report the
error and retry with corrected arguments.
"""

from __future__ import annotations


class DualNetsError(Exception):
    """Base class for recoverable DualNets failures."""


class InvalidArchitecture(DualNetsError, ValueError):
    """Layer widths are malformed."""


class DimensionMismatch(DualNetsError, ValueError):
    """Input or target length does not match the architecture."""


class UnsupportedInputDimension(DualNetsError, ValueError):
    """A 2D-only operation was attempted on a network without two inputs."""


class StaleState(DualNetsError, RuntimeError):
    """Derived state was read before any forward pass."""


class EmptyGraph(DualNetsError, ValueError):
    """A spectral operation received a graph without vertices."""


class InsufficientVertices(DualNetsError, ValueError):
    """A spectral operation needs more vertices than the graph has."""


class DecompositionError(DualNetsError, ArithmeticError):
    """The eigen-solver failed or produced a malformed result."""


__all__ = [
    "DualNetsError",
    "InvalidArchitecture",
    "DimensionMismatch",
    "UnsupportedInputDimension",
    "StaleState",
    "EmptyGraph",
    "InsufficientVertices",
    "DecompositionError",
]
