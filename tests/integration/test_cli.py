import json
from pathlib import Path

import pytest

from cli.main import main


def _last_json_line(capsys):
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    return json.loads(lines[-1])


def test_cli_zero_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "zero-2-3-1"])
    run_dir = Path("runs/zero-2-3-1")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    payload = _last_json_line(capsys)
    assert payload["regions"] == 1
    assert payload["edges"] == 0


def test_cli_overrides_and_exports(tmp_path, capsys):
    run_dir = tmp_path / "run"
    dump = tmp_path / "resolved.json"
    main(
        [
            "--preset",
            "xor-2-4-1",
            "--steps",
            "3",
            "--lr",
            "0.02",
            "--seed",
            "5",
            "--resolution",
            "8",
            "--run-dir",
            str(run_dir),
            "--export-format",
            "python",
            "--no-spectrum",
            "--dump-config",
            str(dump),
        ]
    )
    payload = _last_json_line(capsys)
    assert payload["steps"] == 3
    assert "spectrum" not in payload
    assert list(run_dir.glob("dual_graph_2x4x1_*.py"))

    resolved = json.loads(dump.read_text())
    assert resolved["train"]["lr"] == 0.02
    assert resolved["network"]["seed"] == 5
    assert resolved["data"]["options"]["seed"] == 5
    assert resolved["regions"]["resolution"] == 8


def test_cli_config_override(tmp_path, capsys):
    override = tmp_path / "override.json"
    override.write_text(
        json.dumps({"train": {"steps": 2, "run_dir": str(tmp_path / "cfg")}})
    )
    main(["--preset", "saddle-2-6-1", "--config", str(override), "--resolution", "6"])
    payload = _last_json_line(capsys)
    assert payload["steps"] == 2
    assert Path(payload["manifest"]).parent == tmp_path / "cfg"


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--list-presets"])
    assert excinfo.value.code == 0
    names = capsys.readouterr().out.split()
    assert "xor-2-4-1" in names and "circle-2-8-8-1" in names


def test_cli_reports_library_errors(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"architecture": [2, 0, 1], "weights": [], "biases": []}))
    with pytest.raises(SystemExit) as excinfo:
        main(["--snapshot", str(bad), "--run-dir", str(tmp_path / "never")])
    assert "error:" in str(excinfo.value.code)
