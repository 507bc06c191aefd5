"""Training data import and generation."""

from .csv_examples import load_csv_examples
from .parsing import parse_line, parse_training_data
from .synthetic import available_targets, generate_from_function, get_target, register_target

__all__ = [
    "available_targets",
    "generate_from_function",
    "get_target",
    "load_csv_examples",
    "parse_line",
    "parse_training_data",
    "register_target",
]
