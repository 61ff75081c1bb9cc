from __future__ import annotations

from datetime import datetime

from backend.workout.model import create_workout
from backend.workout.render import build_entry, marker_label, marker_style

CREATED = datetime(2026, 7, 14, 9, 0)


def test_running_entry_fields() -> None:
    workout = create_workout("running", (10, 20), 5.0, 32.0, 150.0, created_at=CREATED)

    entry = build_entry(workout)

    assert entry.id == workout.id
    assert entry.kind == "running"
    assert entry.description == "Running on July 14"
    assert [d.unit for d in entry.details] == ["km", "min", "min/km", "spm"]
    assert [d.text for d in entry.details] == ["5", "32", "6.4", "150"]


def test_cycling_entry_fields() -> None:
    workout = create_workout("cycling", (0, 0), 20.5, 60.0, 100.0, created_at=CREATED)

    entry = build_entry(workout)

    assert [d.unit for d in entry.details] == ["km", "min", "km/h", "m"]
    assert [d.text for d in entry.details] == ["20.5", "60", "20.5", "100"]
    assert entry.details[2].value == workout.speed_km_per_h


def test_marker_label_and_style() -> None:
    run = create_workout("running", (0, 0), 5.0, 30.0, 150.0, created_at=CREATED)
    ride = create_workout("cycling", (0, 0), 5.0, 30.0, 10.0, created_at=CREATED)

    assert marker_label(run) == "🏃 Running on July 14"
    assert marker_label(ride) == "🚴‍♀️ Cycling on July 14"
    assert marker_style(run) == "running-popup"
    assert marker_style(ride) == "cycling-popup"
