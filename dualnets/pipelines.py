"""Pipeline assembly: train a network, map its regions, analyse the dual graph."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .core.errors import InsufficientVertices
from .core.network import FeedForwardNetwork
from .core.types import Bounds, DualGraph, Example, RunResult
from .data.csv_examples import load_csv_examples
from .data.parsing import parse_training_data
from .data.synthetic import generate_from_function
from .regions.dual_graph import build_dual_graph
from .regions.sampler import sample_regions
from .reporting.artifacts import write_json, write_manifest
from .reporting.export import export_filename, write_export
from .reporting.metrics import CsvSink, JsonlSink
from .reporting.plots import LossPlotAdapter, plot_regions
from .reporting.snapshot import load_snapshot, save_snapshot
from .spectral.analyzer import (
    display_eigenvalues,
    eigenvalues,
    graph_fiedler_partition,
    graph_laplacian,
)
from .training.trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-2-4-1": {
        "network": {"architecture": [2, 4, 1], "seed": 0},
        "data": {
            "name": "synthetic",
            "options": {"target": "xor", "n_points": 64, "seed": 0},
        },
        "train": {"lr": 0.01, "steps": 100, "run_dir": "runs/xor-2-4-1", "enable_plots": False},
        "regions": {"bounds": [-3.0, 3.0, -3.0, 3.0], "resolution": 40},
    },
    "circle-2-8-8-1": {
        "network": {"architecture": [2, 8, 8, 1], "seed": 1},
        "data": {
            "name": "synthetic",
            "options": {"target": "circle", "n_points": 128, "seed": 1},
        },
        "train": {
            "lr": 0.001,
            "steps": 200,
            "run_dir": "runs/circle-2-8-8-1",
            "enable_plots": False,
        },
        "regions": {"bounds": [-3.0, 3.0, -3.0, 3.0], "resolution": 50},
    },
    "saddle-2-6-1": {
        "network": {"architecture": [2, 6, 1], "seed": 2},
        "data": {
            "name": "synthetic",
            "options": {"target": "saddle", "n_points": 96, "seed": 2},
        },
        "train": {"lr": 0.005, "steps": 150, "run_dir": "runs/saddle-2-6-1", "enable_plots": False},
        "regions": {"bounds": [-3.0, 3.0, -3.0, 3.0], "resolution": 40},
    },
    "zero-2-3-1": {
        "network": {"architecture": [2, 3, 1], "seed": 0, "init": "zero"},
        "data": {"name": "none"},
        "train": {"lr": 0.01, "steps": 0, "run_dir": "runs/zero-2-3-1", "enable_plots": False},
        "regions": {"bounds": [-3.0, 3.0, -3.0, 3.0], "resolution": 20},
    },
}

REQUIRED_SECTIONS = ("network", "data", "train")


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, Any]:
    try:
        return deepcopy(_PRESETS[name])  # type: ignore[return-value]
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def read_config(path: str | Path) -> Dict[str, Any]:
    """Decode a JSON or YAML config file into a mapping."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return dict(data)


def merge_config(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge_config(dict(base[key]), value)
        else:
            base[key] = deepcopy(value)
    return base


def _load_data(data_cfg: Mapping[str, Any]) -> List[Example]:
    name = str(data_cfg.get("name", "none"))
    options = dict(data_cfg.get("options", {}))
    if name == "none":
        return []
    if name == "synthetic":
        return generate_from_function(
            str(options.get("target", "xor")),
            int(options.get("n_points", 64)),
            seed=options.get("seed"),
            low=float(options.get("low", -3.0)),
            high=float(options.get("high", 3.0)),
        )
    if name == "text":
        if "path" in options:
            text = Path(options["path"]).read_text()
        else:
            text = str(options.get("text", ""))
        return parse_training_data(text)
    if name == "csv":
        if "path" not in options:
            raise KeyError("CSV data requires `path` in the data options")
        return load_csv_examples(options["path"], options.get("target_cols"))
    if name == "inline":
        return [
            Example(inputs=tuple(item["inputs"]), targets=tuple(item["targets"]))
            for item in options.get("examples", [])
        ]
    raise ValueError(f"Unknown data source: {name}")


def _build_network(config: Mapping[str, Any]) -> Tuple[FeedForwardNetwork, List[Example]]:
    if config.get("snapshot"):
        return load_snapshot(config["snapshot"])
    net_cfg = dict(config["network"])
    if "architecture" not in net_cfg:
        raise KeyError("Network config requires `architecture`")
    network = FeedForwardNetwork(net_cfg["architecture"], seed=net_cfg.get("seed"))
    init = str(net_cfg.get("init", "random"))
    if init == "zero":
        network.zero()
    elif init != "random":
        raise ValueError(f"Unknown network init: {init}")
    return network, []


def _resolve_bounds(regions_cfg: Mapping[str, Any]) -> Bounds:
    raw = regions_cfg.get("bounds")
    if raw is None:
        return Bounds()
    if isinstance(raw, Mapping):
        return Bounds(
            float(raw["x_min"]), float(raw["x_max"]), float(raw["y_min"]), float(raw["y_max"])
        )
    x_min, x_max, y_min, y_max = (float(v) for v in raw)
    return Bounds(x_min, x_max, y_min, y_max)


def _resolve_run_dir(train_cfg: Mapping[str, Any], architecture: Sequence[int]) -> Path:
    if "run_dir" in train_cfg:
        return Path(train_cfg["run_dir"])
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / "x".join(str(w) for w in architecture)


def _spectral_summary(graph: DualGraph) -> Dict[str, Any]:
    if not graph.vertices:
        return {}
    values = eigenvalues(graph_laplacian(graph))
    summary: Dict[str, Any] = {
        "eigenvalues": list(values),
        "display": display_eigenvalues(values),
        "components": sum(1 for value in values if value == 0.0),
    }
    try:
        partition = graph_fiedler_partition(graph)
    except InsufficientVertices:
        return summary
    summary["fiedler"] = {
        "value": partition.value,
        "vector": list(partition.vector),
        "non_negative": list(partition.non_negative),
        "negative": list(partition.negative),
    }
    return summary


def run_pipeline(config: Mapping[str, Any]) -> RunResult:
    missing = [section for section in REQUIRED_SECTIONS if section not in config]
    if missing and not config.get("snapshot"):
        raise KeyError(f"Config is missing required sections: {', '.join(missing)}")
    config = json.loads(json.dumps(config))
    train_cfg = dict(config.get("train", {}))
    regions_cfg = dict(config.get("regions", {}))

    network, data = _build_network(config)
    if "data" in config:
        loaded = _load_data(config["data"])
        if loaded or not data:
            data = loaded

    steps = int(train_cfg.get("steps", 100))
    lr = float(train_cfg.get("lr", 0.01))
    seed = config.get("network", {}).get("seed")
    run_dir = _resolve_run_dir(train_cfg, network.architecture)
    run_dir.mkdir(parents=True, exist_ok=True)

    _print_startup_summary(
        architecture=network.architecture,
        examples=len(data),
        steps=steps,
        lr=lr,
        param_count=network.parameter_count(),
    )

    jsonl = JsonlSink(run_dir / "metrics.jsonl", seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv")
    plots = LossPlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    trainer = Trainer(network, lr=lr, callbacks=[jsonl, csv_sink, plots])
    if data and steps > 0:
        trainer.train_batch(data, steps=steps)
    plots.close()

    snapshot_path = save_snapshot(run_dir / "snapshot.json", network, data)

    results: Dict[str, Any] = {
        "steps": trainer.step_counter,
        "loss": trainer.history.stats(),
    }
    graph_path = ""
    spectrum_path = ""
    region_count = 0
    edge_count = 0
    if network.input_size == 2:
        sampled = sample_regions(
            network,
            _resolve_bounds(regions_cfg),
            int(regions_cfg.get("resolution", 40)),
            canvas_size=int(regions_cfg.get("canvas_size", 300)),
        )
        graph = build_dual_graph(sampled)
        region_count = len(graph.vertices)
        edge_count = len(graph.edges)
        graph_path = write_export(run_dir / "dual_graph.json", graph, network.architecture)
        export_format = regions_cfg.get("export_format")
        if export_format and export_format != "json":
            write_export(
                run_dir / export_filename(network.architecture, export_format),
                graph,
                network.architecture,
                fmt=export_format,
            )
        if regions_cfg.get("spectrum", True):
            spectrum_path = write_json(run_dir / "spectrum.json", _spectral_summary(graph))
        if train_cfg.get("enable_plots", False):
            plot_regions(sampled, graph, run_dir / "regions.png")
        print(f"Regions       : {region_count} ({edge_count} dual edges)")
    else:
        print("Regions       : skipped (region sampling needs 2 inputs)")

    results.update({"regions": region_count, "edges": edge_count})
    manifest = write_manifest(run_dir / "manifest.json", config=config, results=results)

    return RunResult(
        steps=trainer.step_counter,
        regions=region_count,
        edges=edge_count,
        snapshot_path=snapshot_path,
        graph_path=graph_path,
        spectrum_path=spectrum_path,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
    )


def _print_startup_summary(
    *,
    architecture: Sequence[int],
    examples: int,
    steps: int,
    lr: float,
    param_count: int,
) -> None:
    print("=== DualNets run ===")
    print(f"Architecture  : {list(architecture)}")
    print(f"Examples      : {examples}")
    print(f"Steps         : {steps}")
    print(f"Learning rate : {lr}")
    print(f"Parameters    : {param_count}")
    print("====================")


__all__ = ["load_preset", "merge_config", "presets", "read_config", "run_pipeline"]
