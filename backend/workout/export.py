"""Workout log exports."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Mapping, Sequence

from backend.workout.model import CyclingWorkout, RunningWorkout, WorkoutRecord
from backend.workout.storage import workout_to_snapshot

CSV_HEADER = [
    "id",
    "kind",
    "created_at",
    "description",
    "lat",
    "lng",
    "distance_km",
    "duration_min",
    "pace_min_per_km",
    "speed_km_per_h",
    "cadence_spm",
    "elevation_gain_m",
    "clicks",
]


def export_workouts_csv(
    records: Sequence[WorkoutRecord],
    clicks: Mapping[str, int],
    out_path: Path,
) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(CSV_HEADER)
        for record in records:
            running = record if isinstance(record, RunningWorkout) else None
            cycling = record if isinstance(record, CyclingWorkout) else None
            writer.writerow(
                [
                    record.id,
                    record.kind,
                    record.created_at.isoformat(),
                    record.description,
                    record.coords[0],
                    record.coords[1],
                    record.distance_km,
                    record.duration_min,
                    running.pace_min_per_km if running else "",
                    cycling.speed_km_per_h if cycling else "",
                    running.cadence_spm if running else "",
                    cycling.elevation_gain_m if cycling else "",
                    clicks.get(record.id, 0),
                ]
            )
    return out_path


def export_workouts_json(
    records: Sequence[WorkoutRecord],
    clicks: Mapping[str, int],
    out_path: Path,
) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [workout_to_snapshot(r, clicks.get(r.id, 0)) for r in records]
    out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return out_path
