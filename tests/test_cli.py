from __future__ import annotations

from pathlib import Path

import pytest

from mapty.cli.main import main


def _add_run(storage_dir: Path, distance: str = "5") -> int:
    return main(
        [
            "--storage-dir",
            str(storage_dir),
            "--add",
            "running",
            "--lat",
            "40.0",
            "--lng",
            "-73.0",
            "--distance",
            distance,
            "--duration",
            "30",
            "--cadence",
            "150",
        ]
    )


def test_add_then_list(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _add_run(tmp_path) == 0
    assert (tmp_path / "workouts.json").exists()
    capsys.readouterr()

    assert main(["--storage-dir", str(tmp_path), "--list"]) == 0

    out = capsys.readouterr().out
    assert "Running on" in out
    assert "6.0 min/km" in out


def test_add_rejects_invalid_distance(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _add_run(tmp_path, distance="0") == 2
    assert "Distance must be > 0" in capsys.readouterr().err
    assert not (tmp_path / "workouts.json").exists()


def test_reset_clears_stored_workouts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _add_run(tmp_path)

    assert main(["--storage-dir", str(tmp_path), "--reset"]) == 0
    assert main(["--storage-dir", str(tmp_path), "--list"]) == 0

    assert "No workouts stored" in capsys.readouterr().out


def test_no_action_prints_help(tmp_path: Path) -> None:
    assert main(["--storage-dir", str(tmp_path)]) == 1


def test_add_warns_about_unreadable_entries(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "workouts.json").write_text('[{"kind": "rowing", "id": "x"}]', encoding="utf-8")

    assert _add_run(tmp_path) == 0

    assert "1 stored workouts could not be read" in capsys.readouterr().err
    backup = tmp_path / "workouts.bak.json"
    assert backup.read_text(encoding="utf-8") == '[{"kind": "rowing", "id": "x"}]'
