"""DualNets public API."""

from .core import activations  # noqa: F401
from .core import linalg  # noqa: F401
from .core import types  # noqa: F401
from .core.errors import DualNetsError
from .core.network import FeedForwardNetwork
from .data import generate_from_function, parse_training_data
from .pipelines import load_preset, presets, run_pipeline
from .regions import build_dual_graph, hamming_distance, sample_regions
from .reporting import load_snapshot, save_snapshot
from .spectral import eigenvalues, fiedler_partition
from .training import Trainer

__all__ = [
    "DualNetsError",
    "FeedForwardNetwork",
    "Trainer",
    "activations",
    "build_dual_graph",
    "eigenvalues",
    "fiedler_partition",
    "generate_from_function",
    "hamming_distance",
    "linalg",
    "load_preset",
    "load_snapshot",
    "parse_training_data",
    "presets",
    "run_pipeline",
    "sample_regions",
    "save_snapshot",
    "types",
]
