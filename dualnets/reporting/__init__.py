"""Reporting utilities for DualNets."""

from .artifacts import write_manifest
from .export import to_json_dict, to_python_script, write_export
from .metrics import CsvSink, JsonlSink
from .plots import LossPlotAdapter, plot_regions
from .snapshot import load_snapshot, save_snapshot

__all__ = [
    "CsvSink",
    "JsonlSink",
    "LossPlotAdapter",
    "load_snapshot",
    "plot_regions",
    "save_snapshot",
    "to_json_dict",
    "to_python_script",
    "write_export",
    "write_manifest",
]
