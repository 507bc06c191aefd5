"""Core numerical primitives for DualNets."""

from . import activations, errors, linalg, types
from .network import FeedForwardNetwork

__all__ = ["FeedForwardNetwork", "activations", "errors", "linalg", "types"]
