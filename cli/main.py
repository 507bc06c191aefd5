"""Command line entry point for DualNets runs."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

from dualnets import pipelines
from dualnets.core.errors import DualNetsError


def _format_result(result) -> str:
    payload = {
        "steps": result.steps,
        "regions": result.regions,
        "edges": result.edges,
        "snapshot": result.snapshot_path,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if result.graph_path:
        payload["graph"] = result.graph_path
    if result.spectrum_path:
        payload["spectrum"] = result.spectrum_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-2-4-1",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument(
        "--snapshot", type=Path, help="Start from a saved network snapshot"
    )
    parser.add_argument("--steps", type=int, help="Override the number of training steps")
    parser.add_argument("--lr", type=float, help="Override the learning rate")
    parser.add_argument("--seed", type=int, help="Seed used for initialisation and data")
    parser.add_argument(
        "--resolution", type=int, help="Grid resolution used for region sampling"
    )
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument(
        "--export-format",
        choices=["json", "python"],
        help="Also export the dual graph in this format",
    )
    parser.add_argument(
        "--no-spectrum",
        action="store_true",
        help="Skip the Laplacian spectrum of the dual graph",
    )
    parser.add_argument(
        "--enable-plots", action="store_true", help="Enable plotting adapters"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log diagnostics at DEBUG level"
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = pipelines.load_preset(args.preset)

    if args.config:
        override = pipelines.read_config(args.config)
        if {"network", "data", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    train_cfg = config.setdefault("train", {})
    regions_cfg = config.setdefault("regions", {})
    if args.snapshot:
        config["snapshot"] = str(args.snapshot)
    if args.steps is not None:
        train_cfg["steps"] = int(args.steps)
    if args.lr is not None:
        train_cfg["lr"] = float(args.lr)
    if args.seed is not None:
        config.setdefault("network", {})["seed"] = int(args.seed)
        data_cfg = config.setdefault("data", {"name": "none"})
        data_cfg.setdefault("options", {})["seed"] = int(args.seed)
    if args.resolution is not None:
        regions_cfg["resolution"] = int(args.resolution)
    if args.run_dir:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.export_format:
        regions_cfg["export_format"] = args.export_format
    if args.no_spectrum:
        regions_cfg["spectrum"] = False
    if args.enable_plots:
        train_cfg["enable_plots"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    try:
        result = pipelines.run_pipeline(config)
    except DualNetsError as exc:
        raise SystemExit(f"error: {exc}") from exc

    print(_format_result(result))


if __name__ == "__main__":
    main()
