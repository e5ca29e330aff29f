"""Tests for the ``pwaforge`` command-line entry point (pwaforge.pipeline.main)."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

from pwaforge.config import ForgeConfig
from pwaforge.pipeline import main

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PWAFORGE_OUTPUT_DIR",
        "PWAFORGE_CONTENT_PROVIDER",
        "PWAFORGE_CONTENT_TIMEOUT",
        "PWAFORGE_MAX_ITERATIONS",
        "PWAFORGE_MAX_PARALLEL_ARTIFACTS",
        "PWAFORGE_MAX_PARALLEL_REPAIRS",
    ):
        monkeypatch.delenv(name, raising=False)


def _selection_file(tmp_path: Path, data: Any) -> Path:
    path = tmp_path / "selection.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.mark.unit
def test_generates_project(tmp_path: Path, restaurant_selection):
    selection = _selection_file(tmp_path, restaurant_selection)
    out = tmp_path / "out"

    main([str(selection), "-o", str(out)])

    assert (out / "package.json").is_file()
    assert (out / "src" / "pages" / "Gallery.tsx").is_file()
    report = json.loads((out / "generation-report.json").read_text(encoding="utf-8"))
    assert report["ready"] is True
    assert report["iterations"] == 0


@pytest.mark.unit
def test_stand_in_run_is_ready(tmp_path: Path, chat_selection):
    selection = _selection_file(tmp_path, chat_selection)
    out = tmp_path / "out"

    main([str(selection), "--output", str(out), "--max-iterations", "3"])

    assert (out / "src" / "pages" / "Chat.tsx").is_file()
    report = json.loads((out / "generation-report.json").read_text(encoding="utf-8"))
    assert report["stand_in_artifacts"] == ["src/pages/Chat.tsx", "src/pages/Chat.css"]


@pytest.mark.unit
def test_output_dir_from_environment(tmp_path: Path, monkeypatch, restaurant_selection):
    selection = _selection_file(tmp_path, restaurant_selection)
    monkeypatch.setenv("PWAFORGE_OUTPUT_DIR", str(tmp_path / "env-out"))

    main([str(selection)])

    assert (tmp_path / "env-out" / "src" / "App.tsx").is_file()


@pytest.mark.unit
def test_missing_selection_file(tmp_path: Path):
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "nope.json"), "-o", str(tmp_path / "out")])
    assert exc_info.value.code == 1


@pytest.mark.unit
def test_invalid_json(tmp_path: Path):
    path = tmp_path / "selection.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        main([str(path), "-o", str(tmp_path / "out")])
    assert exc_info.value.code == 1


@pytest.mark.unit
def test_malformed_selection_writes_nothing(tmp_path: Path, capsys):
    selection = _selection_file(tmp_path, {"framework": "vue", "selectedFeatures": ["chat"]})
    out = tmp_path / "out"
    with pytest.raises(SystemExit) as exc_info:
        main([str(selection), "-o", str(out)])
    assert exc_info.value.code == 1
    assert not out.exists()
    assert "Unsupported framework" in capsys.readouterr().out


@pytest.mark.unit
def test_unknown_provider_from_environment(tmp_path: Path, monkeypatch, restaurant_selection):
    selection = _selection_file(tmp_path, restaurant_selection)
    monkeypatch.setenv("PWAFORGE_CONTENT_PROVIDER", "carrier-pigeon")
    with pytest.raises(SystemExit) as exc_info:
        main([str(selection), "-o", str(tmp_path / "out")])
    assert exc_info.value.code == 1


@pytest.mark.unit
@pytest.mark.parametrize("flag,value", [("--max-iterations", "0"), ("--content-timeout", "-1")])
def test_rejects_non_positive_limits(tmp_path: Path, restaurant_selection, flag: str, value: str):
    selection = _selection_file(tmp_path, restaurant_selection)
    with pytest.raises(SystemExit) as exc_info:
        main([str(selection), flag, value])
    assert exc_info.value.code == 2


@pytest.mark.unit
def test_entry_point_imports_in_fresh_interpreter():
    code = (
        "import pwaforge.pipeline\n"
        "from pwaforge.resolver import DEFAULT_TABLES\n"
        "from pwaforge.generator import DEFAULT_CATALOG\n"
        "for table in (DEFAULT_TABLES.features, DEFAULT_CATALOG.components):\n"
        "    try:\n"
        "        table['x'] = None\n"
        "    except TypeError:\n"
        "        continue\n"
        "    raise SystemExit('table is writable')\n"
    )
    completed = subprocess.run(
        [sys.executable, "-c", code],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=60,
    )
    assert completed.returncode == 0, completed.stderr


@pytest.mark.unit
@pytest.mark.parametrize(
    "name,value",
    [
        ("PWAFORGE_MAX_ITERATIONS", "many"),
        ("PWAFORGE_MAX_ITERATIONS", "0"),
        ("PWAFORGE_CONTENT_TIMEOUT", "soon"),
        ("PWAFORGE_CONTENT_TIMEOUT", "-3"),
    ],
)
def test_malformed_environment_value(
    tmp_path: Path, monkeypatch, capsys, restaurant_selection, name: str, value: str
):
    selection = _selection_file(tmp_path, restaurant_selection)
    monkeypatch.setenv(name, value)
    with pytest.raises(SystemExit) as exc_info:
        main([str(selection), "-o", str(tmp_path / "out")])
    assert exc_info.value.code == 1
    assert "invalid configuration" in capsys.readouterr().out
    assert not (tmp_path / "out").exists()


@pytest.mark.unit
def test_effective_settings_saved_and_reusable(tmp_path: Path, chat_selection):
    selection = _selection_file(tmp_path, chat_selection)
    out = tmp_path / "out"
    main([str(selection), "-o", str(out), "--max-iterations", "3", "--content-timeout", "2"])

    saved = out / "pwaforge.json"
    assert saved.is_file()
    config = ForgeConfig.load(saved)
    assert config.repair.max_iterations == 3
    assert config.content.timeout == 2.0

    again = tmp_path / "again"
    main([str(selection), "--config", str(saved), "-o", str(again)])
    assert ForgeConfig.load(again / "pwaforge.json").repair.max_iterations == 3
    assert (again / "src" / "pages" / "Chat.tsx").is_file()


@pytest.mark.unit
def test_missing_config_file(tmp_path: Path, restaurant_selection):
    selection = _selection_file(tmp_path, restaurant_selection)
    with pytest.raises(SystemExit) as exc_info:
        main([str(selection), "-c", str(tmp_path / "nope.json"), "-o", str(tmp_path / "out")])
    assert exc_info.value.code == 1
