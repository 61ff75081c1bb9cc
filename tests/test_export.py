from __future__ import annotations

import csv
import json
from pathlib import Path

from backend.workout.export import export_workouts_csv, export_workouts_json
from backend.workout.model import create_workout


def test_export_csv_and_json(tmp_path: Path) -> None:
    run = create_workout("running", (10, 20), 5.0, 30.0, 150.0)
    ride = create_workout("cycling", (0, 0), 20.0, 60.0, 100.0)

    csv_path = export_workouts_csv([run, ride], {ride.id: 4}, tmp_path / "out" / "log.csv")
    json_path = export_workouts_json([run, ride], {ride.id: 4}, tmp_path / "log.json")

    with csv_path.open("r", encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert [r["kind"] for r in rows] == ["running", "cycling"]
    assert float(rows[0]["pace_min_per_km"]) == 6.0
    assert rows[0]["speed_km_per_h"] == ""
    assert float(rows[1]["speed_km_per_h"]) == 20.0
    assert rows[1]["clicks"] == "4"

    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload[1]["id"] == ride.id
    assert payload[1]["clicks"] == 4
