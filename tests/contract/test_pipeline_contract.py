import json
from pathlib import Path

import pytest

from dualnets import pipelines
from dualnets.core.network import FeedForwardNetwork
from dualnets.reporting import save_snapshot


def _config(run_dir, **train):
    config = pipelines.load_preset("xor-2-4-1")
    config["data"]["options"]["n_points"] = 16
    config["train"].update({"steps": 5, "run_dir": str(run_dir)}, **train)
    config["regions"]["resolution"] = 12
    return config


def test_pipeline_produces_artifacts(tmp_path):
    result = pipelines.run_pipeline(_config(tmp_path / "run"))
    run_dir = tmp_path / "run"
    assert result.steps == 5
    assert result.regions >= 1
    for name in ("snapshot.json", "dual_graph.json", "spectrum.json", "metrics.csv"):
        assert (run_dir / name).exists()

    metrics = [
        json.loads(line)
        for line in Path(result.metrics_path).read_text().splitlines()
        if line
    ]
    assert [entry["step"] for entry in metrics] == [1, 2, 3, 4, 5]
    assert all("loss" in entry and entry["seed"] == 0 for entry in metrics)

    graph = json.loads(Path(result.graph_path).read_text())
    assert len(graph["vertices"]) == result.regions
    assert len(graph["edges"]) == result.edges
    assert graph["metadata"]["networkArchitecture"] == [2, 4, 1]

    spectrum = json.loads(Path(result.spectrum_path).read_text())
    assert len(spectrum["eigenvalues"]) == result.regions
    assert spectrum["eigenvalues"][0] == 0.0

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["network"]["architecture"] == [2, 4, 1]
    assert manifest["results"]["regions"] == result.regions


def test_pipeline_determinism(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "run1"))
    second = pipelines.run_pipeline(_config(tmp_path / "run2"))
    assert Path(first.metrics_path).read_text() == Path(second.metrics_path).read_text()
    graph_1 = json.loads(Path(first.graph_path).read_text())
    graph_2 = json.loads(Path(second.graph_path).read_text())
    assert graph_1["vertices"] == graph_2["vertices"]
    assert graph_1["edges"] == graph_2["edges"]
    assert Path(first.spectrum_path).read_text() == Path(second.spectrum_path).read_text()


def test_zero_preset_yields_single_region(tmp_path):
    config = pipelines.load_preset("zero-2-3-1")
    config["train"]["run_dir"] = str(tmp_path / "zero")
    result = pipelines.run_pipeline(config)
    assert (result.steps, result.regions, result.edges) == (0, 1, 0)
    spectrum = json.loads(Path(result.spectrum_path).read_text())
    assert spectrum["eigenvalues"] == [0.0]
    assert "fiedler" not in spectrum


def test_non_planar_network_skips_regions(tmp_path):
    config = {
        "network": {"architecture": [3, 2, 1], "seed": 0},
        "data": {
            "name": "inline",
            "options": {"examples": [{"inputs": [1, 2, 3], "targets": [0.5]}]},
        },
        "train": {"lr": 0.01, "steps": 3, "run_dir": str(tmp_path / "flat")},
    }
    result = pipelines.run_pipeline(config)
    assert result.steps == 3
    assert result.regions == 0
    assert result.graph_path == ""
    assert not (tmp_path / "flat" / "dual_graph.json").exists()


def test_pipeline_resumes_from_snapshot(tmp_path):
    network = FeedForwardNetwork([2, 2, 1], seed=9)
    snapshot = save_snapshot(tmp_path / "start.json", network)
    config = {
        "snapshot": snapshot,
        "data": {"name": "text", "options": {"text": "1,1 -> 0\n-1,1 -> 1"}},
        "train": {"lr": 0.01, "steps": 2, "run_dir": str(tmp_path / "resume")},
        "regions": {"resolution": 6, "export_format": "python"},
    }
    result = pipelines.run_pipeline(config)
    assert result.steps == 2
    payload = json.loads(Path(result.snapshot_path).read_text())
    assert payload["architecture"] == [2, 2, 1]
    assert len(payload["data"]) == 2
    assert list((tmp_path / "resume").glob("dual_graph_2x2x1_*.py"))


def test_missing_sections_and_unknown_sources():
    with pytest.raises(KeyError):
        pipelines.run_pipeline({"network": {"architecture": [2, 1]}})
    with pytest.raises(KeyError):
        pipelines.load_preset("nope")
    config = pipelines.load_preset("xor-2-4-1")
    config["data"] = {"name": "mystery"}
    with pytest.raises(ValueError):
        pipelines.run_pipeline(config)


def test_presets_are_independent_copies():
    config = pipelines.load_preset("xor-2-4-1")
    config["network"]["architecture"].append(7)
    assert pipelines.load_preset("xor-2-4-1")["network"]["architecture"] == [2, 4, 1]
    assert {"xor-2-4-1", "zero-2-3-1"} <= set(pipelines.presets())


def test_config_files_and_merge(tmp_path):
    yaml_path = tmp_path / "override.yaml"
    yaml_path.write_text("train:\n  steps: 7\nregions:\n  resolution: 9\n")
    override = pipelines.read_config(yaml_path)
    merged = pipelines.merge_config(pipelines.load_preset("xor-2-4-1"), override)
    assert merged["train"]["steps"] == 7
    assert merged["train"]["lr"] == 0.01
    assert merged["regions"]["resolution"] == 9

    json_path = tmp_path / "override.json"
    json_path.write_text('{"network": {"seed": 3}}')
    assert pipelines.read_config(json_path) == {"network": {"seed": 3}}
    with pytest.raises(ValueError):
        pipelines.read_config(tmp_path / "override.toml")
