from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from backend.cli.main import build_parser, main
from backend.workout.model import create_workout
from backend.workout.storage import WORKOUTS_KEY, JsonFileStorage, WorkoutRepository


def _seed(path: Path) -> None:
    WorkoutRepository(JsonFileStorage(path)).save(
        [
            create_workout("running", (10, 20), 5.0, 30.0, 150.0),
            create_workout("cycling", (0, 0), 20.0, 60.0, 100.0),
        ]
    )


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])

    assert args.port == 8088
    assert args.geolocation_timeout == 30.0
    assert args.debug is False
    assert args.data_file is None


def test_list_prints_saved_workouts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    data_file = tmp_path / "storage.json"
    _seed(data_file)

    assert main(["--data-file", str(data_file), "--list"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert len(out) == 2
    assert out[0].startswith("Running on ")
    assert "min/km" in out[0]
    assert "km/h" in out[1]


def test_list_without_data(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--data-file", str(tmp_path / "none.json"), "--list"]) == 0
    assert "No saved workouts" in capsys.readouterr().out


def test_export_csv(tmp_path: Path) -> None:
    data_file = tmp_path / "storage.json"
    out_file = tmp_path / "export.csv"
    _seed(data_file)

    assert main(["--data-file", str(data_file), "--export-csv", str(out_file)]) == 0

    with out_file.open("r", encoding="utf-8", newline="") as handle:
        rows = list(csv.reader(handle))
    assert rows[0][0] == "id"
    assert len(rows) == 3


def test_reset_clears_storage(tmp_path: Path) -> None:
    data_file = tmp_path / "storage.json"
    _seed(data_file)

    assert main(["--data-file", str(data_file), "--reset"]) == 0

    assert JsonFileStorage(data_file).get_item(WORKOUTS_KEY) is None


def test_export_json(tmp_path: Path) -> None:
    data_file = tmp_path / "storage.json"
    out_file = tmp_path / "export.json"
    _seed(data_file)

    assert main(["--data-file", str(data_file), "--export-json", str(out_file)]) == 0

    payload = json.loads(out_file.read_text(encoding="utf-8"))
    assert [item["kind"] for item in payload] == ["running", "cycling"]
