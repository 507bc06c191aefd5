"""Activation utilities for DualNets."""

from __future__ import annotations

import numpy as np

from .types import Array


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(x, 0.0)


def relu_deriv(z: Array) -> Array:
    """ReLU sub-gradient, 0 at exactly zero."""

    return (z > 0).astype(np.float64)


def active_bits(x: Array) -> Array:
    """1 where ``x`` is strictly positive, else 0."""

    return (x > 0).astype(np.int8)
