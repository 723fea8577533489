"""Tests for lottiekit.cli: argument parsing and command handlers."""

from __future__ import annotations

import json
import subprocess
import sys
from typing import Optional

import pytest

from lottiekit.cli import build_parser, main


def _run_cli(*args: str, input_text: Optional[str] = None) -> subprocess.CompletedProcess:
    """Run the lottiekit CLI as a subprocess and return the result."""
    cmd = [sys.executable, "-m", "lottiekit"] + list(args)
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        input=input_text,
        timeout=60,
    )


def _main(monkeypatch, capsys, *args: str) -> tuple[int, dict]:
    """Run ``main`` in-process; returns (exit code, parsed stdout)."""
    monkeypatch.setattr(sys, "argv", ["lottiekit", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    out = capsys.readouterr().out
    return exc_info.value.code, json.loads(out)


@pytest.fixture
def project_file(tmp_path, moving_project):
    path = tmp_path / "project.json"
    path.write_text(json.dumps(moving_project.to_dict()))
    return path


@pytest.fixture
def lottie_file(tmp_path, minimal_lottie):
    path = tmp_path / "anim.json"
    path.write_text(json.dumps(minimal_lottie))
    return path


class TestParser:
    def test_subcommands(self):
        parser = build_parser()
        args = parser.parse_args(["value", "p.json", "--layer", "l", "--property", "x", "--at", "1"])
        assert args.command == "value"
        assert args.at == "1"
        args = parser.parse_args(["-v", "export", "p.json", "--compact"])
        assert args.verbose
        assert args.compact


class TestCommands:
    def test_capabilities(self, monkeypatch, capsys):
        code, data = _main(monkeypatch, capsys, "capabilities")
        assert code == 0
        assert data["lottie_version"] == "5.5.7"
        assert "easeInOut" in data["easings"]
        assert "Q" in data["path_commands"]

    def test_export_to_stdout(self, monkeypatch, capsys, project_file):
        code, doc = _main(monkeypatch, capsys, "export", str(project_file))
        assert code == 0
        assert doc["op"] == 60
        assert doc["layers"][0]["ks"]["p"]["k"][0]["s"] == [100, 0]

    def test_export_to_file(self, monkeypatch, capsys, project_file, tmp_path):
        out = tmp_path / "out.json"
        code, data = _main(monkeypatch, capsys, "export", str(project_file), "-o", str(out), "--compact")
        assert code == 0
        assert data == {"success": True, "output": str(out), "layers": 1, "frames": 60}
        assert json.loads(out.read_text())["v"] == "5.5.7"

    def test_export_missing_file(self, monkeypatch, capsys, tmp_path):
        code, data = _main(monkeypatch, capsys, "export", str(tmp_path / "nope.json"))
        assert code == 1
        assert data["code"] == "INPUT_NOT_FOUND"

    def test_import(self, monkeypatch, capsys, lottie_file):
        code, data = _main(monkeypatch, capsys, "import", str(lottie_file))
        assert code == 0
        assert data["success"] is True
        assert data["project"]["layers"][0]["element"]["type"] == "rect"

    def test_import_invalid_document(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"v": "5.5.7"}))
        code, data = _main(monkeypatch, capsys, "import", str(path))
        assert code == 1
        assert data["code"] == "INVALID_LOTTIE"

    def test_import_bad_json(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        code, data = _main(monkeypatch, capsys, "import", str(path))
        assert code == 1
        assert data["code"] == "INVALID_JSON"

    def test_validate(self, monkeypatch, capsys, lottie_file):
        code, data = _main(monkeypatch, capsys, "validate", str(lottie_file))
        assert code == 0
        assert data["status"] == "valid"

    def test_validate_invalid(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"layers": []}))
        code, data = _main(monkeypatch, capsys, "validate", str(path))
        assert code == 1
        assert data["valid"] is False

    def test_value(self, monkeypatch, capsys, project_file):
        code, data = _main(
            monkeypatch, capsys,
            "value", str(project_file), "--layer", "layer-1", "--property", "x", "--at", "0.5",
        )
        assert code == 0
        assert data["value"] == pytest.approx(200)
        assert data["frame"] == 15

    def test_value_clock_time(self, monkeypatch, capsys, project_file):
        code, data = _main(
            monkeypatch, capsys,
            "value", str(project_file), "--layer", "layer-1", "--property", "fill", "--at", "00:00:01",
        )
        assert code == 0
        assert data["time"] == 1
        assert data["value"] == "#ff0000"

    @pytest.mark.parametrize("args,error", [
        (("--layer", "missing", "--property", "x", "--at", "0"), "LAYER_NOT_FOUND"),
        (("--layer", "layer-1", "--property", "width", "--at", "0"), "INVALID_PROPERTY"),
        (("--layer", "layer-1", "--property", "x", "--at", "later"), "INVALID_TIME_FORMAT"),
    ])
    def test_value_errors(self, monkeypatch, capsys, project_file, args, error):
        code, data = _main(monkeypatch, capsys, "value", str(project_file), *args)
        assert code == 1
        assert data["code"] == error
        assert data["recovery"]

    def test_svg(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "icon.svg"
        path.write_text('<svg viewBox="0 0 64 32"><circle cx="1" cy="1" r="1"/></svg>')
        code, data = _main(monkeypatch, capsys, "svg", str(path), "--name", "Icon", "--group", "All")
        assert code == 0
        project = data["project"]
        assert project["name"] == "Icon"
        assert (project["width"], project["height"]) == (64, 32)
        assert [layer["name"] for layer in project["layers"]][0] == "All"
        assert data["warnings"] == []

    def test_svg_invalid(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "broken.svg"
        path.write_text("<svg>")
        code, data = _main(monkeypatch, capsys, "svg", str(path))
        assert code == 1
        assert data["code"] == "INVALID_SVG"

    def test_path(self, monkeypatch, capsys):
        code, data = _main(monkeypatch, capsys, "path", "M 0 0 L 100 0 A 1 1 0 0 1 2 2")
        assert code == 0
        assert data["path"]["v"] == [[0, 0], [100, 0]]
        assert data["path"]["c"] is False
        assert data["unsupported"] == ["A"]

    def test_no_command(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["lottiekit"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1


class TestSubprocess:
    def test_stdin_round_trip(self, moving_project):
        exported = _run_cli("export", "-", input_text=json.dumps(moving_project.to_dict()))
        assert exported.returncode == 0, exported.stderr
        imported = _run_cli("import", "-", input_text=exported.stdout)
        assert imported.returncode == 0, imported.stderr
        data = json.loads(imported.stdout)
        xs = [kf["value"] for kf in data["project"]["keyframes"] if kf["property"] == "x"]
        assert xs == [100, 300]

    def test_verbose_logs_go_to_stderr(self):
        result = _run_cli("-v", "path", "M 0 0 L 5")
        assert result.returncode == 0
        assert json.loads(result.stdout)["path"]["v"] == [[0, 0]]
        assert "Dropping L command" in result.stderr
