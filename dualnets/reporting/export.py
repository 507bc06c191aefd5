"""One-way exports of the dual graph."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Dict, Sequence

from ..core.types import DualGraph

DESCRIPTION = "Dual graph of neural network decision regions"


def _timestamp() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def to_json_dict(
    graph: DualGraph, architecture: Sequence[int], timestamp: str | None = None
) -> Dict[str, Any]:
    return {
        "metadata": {
            "networkArchitecture": list(architecture),
            "timestamp": timestamp or _timestamp(),
            "description": DESCRIPTION,
        },
        "vertices": [
            {"id": v.id, "x": v.x, "y": v.y, "color": v.color} for v in graph.vertices
        ],
        "edges": [{"source": a, "target": b} for a, b in graph.edges],
        "adjacencyList": {str(k): v for k, v in graph.adjacency_list().items()},
    }


def to_python_script(
    graph: DualGraph, architecture: Sequence[int], timestamp: str | None = None
) -> str:
    """Python source defining ``vertices`` and ``edges`` lists."""

    vertices = ",\n    ".join(
        f'[{v.id}, {v.x:.2f}, {v.y:.2f}, "{v.color}"]' for v in graph.vertices
    )
    edges = ",\n    ".join(f"[{a}, {b}]" for a, b in graph.edges)
    arch = ", ".join(str(width) for width in architecture)
    return f"""# {DESCRIPTION}
# Network architecture: [{arch}]
# Generated on: {timestamp or _timestamp()}

# Vertices: [id, x, y, color]
vertices = [
    {vertices}
]

# Edges: [source, target]
edges = [
    {edges}
]

# Example usage:
# import matplotlib.pyplot as plt
# import networkx as nx
#
# G = nx.Graph()
# for vertex in vertices:
#     G.add_node(vertex[0], pos=(vertex[1], vertex[2]), color=vertex[3])
# G.add_edges_from(edges)
#
# pos = nx.get_node_attributes(G, 'pos')
# colors = [G.nodes[node]['color'] for node in G.nodes()]
# nx.draw(G, pos, node_color=colors, with_labels=True)
# plt.show()
"""


def export_filename(architecture: Sequence[int], fmt: str, date: str | None = None) -> str:
    suffix = {"json": "json", "python": "py"}.get(fmt)
    if suffix is None:
        raise ValueError(f"Unknown export format: {fmt}")
    date = date or time.strftime("%Y-%m-%d", time.gmtime())
    return f"dual_graph_{'x'.join(str(w) for w in architecture)}_{date}.{suffix}"


def write_export(
    path: str | Path,
    graph: DualGraph,
    architecture: Sequence[int],
    fmt: str | None = None,
) -> str:
    """Write ``graph`` to ``path``; the format follows the suffix unless given."""

    path = Path(path)
    fmt = fmt or ("python" if path.suffix == ".py" else "json")
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "json":
        path.write_text(json.dumps(to_json_dict(graph, architecture), indent=2))
    elif fmt == "python":
        path.write_text(to_python_script(graph, architecture))
    else:
        raise ValueError(f"Unknown export format: {fmt}")
    return str(path)


__all__ = ["export_filename", "to_json_dict", "to_python_script", "write_export"]
