"""Training loops for DualNets."""

from .trainer import LossHistory, Trainer, validate_examples

__all__ = ["LossHistory", "Trainer", "validate_examples"]
