"""Flat JSON snapshots of network parameters and training data.

Layout::

    {
      "architecture": [2, 4, 1],
      "weights": [[[w, w], ...], ...],
      "biases": [[[b], [b], ...], ...],
      "data": [{"inputs": [...], "targets": [...]}, ...]
    }

Numbers are written with ``repr`` precision so a load reproduces the
saved parameters bit for bit.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from ..core.network import FeedForwardNetwork
from ..core.types import Example, NetworkState
from ..data.parsing import example_from_mapping

REQUIRED_KEYS = ("architecture", "weights", "biases")


def snapshot_to_dict(
    network: FeedForwardNetwork, data: Sequence[Example] = ()
) -> Dict[str, Any]:
    return {
        "architecture": list(network.architecture),
        "weights": [W.tolist() for W in network.weights],
        "biases": [[[float(value)] for value in b] for b in network.biases],
        "data": [example.to_dict() for example in data],
    }


def _format_array(value: Any, depth: int) -> str:
    """Numbers-only lists on one line, nested lists one item per line."""

    if not isinstance(value, list):
        return json.dumps(value)
    if all(isinstance(item, (int, float)) for item in value):
        return "[" + ", ".join(json.dumps(item) for item in value) + "]"
    indent = "  " * depth
    inner = "  " * (depth + 1)
    items = [inner + _format_array(item, depth + 1) for item in value]
    return "[\n" + ",\n".join(items) + "\n" + indent + "]"


def format_snapshot(payload: Mapping[str, Any]) -> str:
    parts = [
        '  "architecture": ' + _format_array(list(payload["architecture"]), 1) + ",",
        '  "weights": ' + _format_array(list(payload["weights"]), 1) + ",",
        '  "biases": ' + _format_array(list(payload["biases"]), 1) + ",",
        '  "data": ' + json.dumps(list(payload.get("data", []))),
    ]
    return "{\n" + "\n".join(parts) + "\n}"


def save_snapshot(
    path: str | Path, network: FeedForwardNetwork, data: Sequence[Example] = ()
) -> str:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_snapshot(snapshot_to_dict(network, data)))
    return str(path)


def network_from_dict(
    payload: Mapping[str, Any]
) -> Tuple[FeedForwardNetwork, List[Example]]:
    """Rebuild a network and its training data from a decoded snapshot."""

    missing = [key for key in REQUIRED_KEYS if key not in payload]
    if missing:
        raise KeyError(f"Snapshot is missing required keys: {', '.join(missing)}")
    network = FeedForwardNetwork(payload["architecture"], seed=0)
    network.load_state(
        NetworkState(
            architecture=list(payload["architecture"]),
            weights=list(payload["weights"]),
            biases=list(payload["biases"]),
        )
    )
    data = []
    for idx, item in enumerate(payload.get("data") or []):
        example = example_from_mapping(item)
        if example is None:
            raise ValueError(f"Snapshot data entry {idx} is not an inputs/targets object")
        data.append(example)
    return network, data


def load_snapshot(path: str | Path) -> Tuple[FeedForwardNetwork, List[Example]]:
    payload = json.loads(Path(path).read_text())
    if not isinstance(payload, Mapping):
        raise TypeError(f"Snapshot {path} must decode to a mapping")
    return network_from_dict(payload)


__all__ = [
    "format_snapshot",
    "load_snapshot",
    "network_from_dict",
    "save_snapshot",
    "snapshot_to_dict",
]
