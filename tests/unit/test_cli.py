"""Tests for CLI tool."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[2] / "src"


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "lightbox.cli.main", *args],
        capture_output=True,
        text=True,
        env=env,
    )


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = _run("--help")
    assert result.returncode == 0
    assert "lightbox: pixel-grid state codec" in result.stdout
    assert "--analyze" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = _run("--version")
    assert result.returncode == 0
    assert "lightbox 0.1.0" in result.stdout


def test_cli_list_schemas() -> None:
    result = _run("--list-schemas")
    assert result.returncode == 0
    for name in ("compact-v1", "extended-v2", "tactical-v3", "text-v4"):
        assert name in result.stdout


def test_cli_analyze() -> None:
    """Test CLI --analyze prints the field table."""
    result = _run("--analyze", "tactical-v3")
    assert result.returncode == 0
    assert "player_hp" in result.stdout
    assert "target_classification" in result.stdout
    assert "parity" in result.stdout
    assert "#ff0000" in result.stdout


def test_cli_analyze_text_schema() -> None:
    result = _run("--analyze", "4")
    assert result.returncode == 0
    assert "text bytes" in result.stdout


def test_cli_analyze_unknown_schema() -> None:
    """Test CLI --analyze with an unregistered schema."""
    result = _run("--analyze", "no-such-schema")
    assert result.returncode == 1
    assert "Unknown schema" in result.stderr


def test_cli_encode_then_decode(tmp_path: Path) -> None:
    """Test a sample survives encode to PNG and decode from PNG."""
    sample = tmp_path / "sample.json"
    sample.write_text(
        json.dumps({"player_hp": [50, 100], "player_level": 17, "in_combat": True})
    )
    image = tmp_path / "frame.png"

    encoded = _run("--encode", str(sample), "--schema", "compact-v1", "--out", str(image))
    assert encoded.returncode == 0, encoded.stderr
    assert "v1 player_hp=63" in encoded.stdout
    assert image.exists()

    decoded = _run("--decode", str(image), "--schema", "compact-v1")
    assert decoded.returncode == 0, decoded.stderr
    assert "player_hp=63" in decoded.stdout
    assert "player_level=17" in decoded.stdout
    assert "in_combat=True" in decoded.stdout


def test_cli_encode_uses_config(tmp_path: Path) -> None:
    config = tmp_path / "lightbox.json"
    config.write_text(json.dumps({"schema_name": "tactical-v3", "cell_size": 4}))
    sample = tmp_path / "sample.json"
    sample.write_text(json.dumps({"player_class": "ROGUE"}))
    image = tmp_path / "frame.png"

    result = _run("--encode", str(sample), "--config", str(config), "--out", str(image))
    assert result.returncode == 0, result.stderr
    assert result.stdout.startswith("v3 ")

    decoded = _run("--decode", str(image), "--config", str(config))
    assert "player_class=ROGUE" in decoded.stdout


def test_cli_encode_missing_file() -> None:
    result = _run("--encode", "nonexistent.json")
    assert result.returncode == 1
    assert "not found" in result.stderr.lower()


def test_cli_decode_wrong_schema(tmp_path: Path) -> None:
    """Test decoding an image with the wrong schema fails cleanly."""
    sample = tmp_path / "sample.json"
    sample.write_text("{}")
    image = tmp_path / "frame.png"
    _run("--encode", str(sample), "--schema", "tactical-v3", "--out", str(image))

    result = _run("--decode", str(image), "--schema", "compact-v1")
    assert result.returncode == 1
    assert "Error" in result.stderr


def test_cli_decode_not_an_image(tmp_path: Path) -> None:
    """Test decoding a file Pillow can't read fails cleanly."""
    image = tmp_path / "notimage.png"
    image.write_text("just some text")

    result = _run("--decode", str(image), "--schema", "compact-v1")
    assert result.returncode == 1
    assert "Error decoding" in result.stderr
    assert "Traceback" not in result.stderr
