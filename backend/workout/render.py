"""Display fields for workout list entries and map markers."""

from __future__ import annotations

from dataclasses import dataclass

from backend.workout.model import CyclingWorkout, RunningWorkout, WorkoutKind, WorkoutRecord

KIND_ICONS: dict[str, str] = {
    "running": "🏃",
    "cycling": "🚴‍♀️",
}


@dataclass(frozen=True)
class EntryDetail:
    icon: str
    value: float
    text: str
    unit: str


@dataclass(frozen=True)
class WorkoutEntry:
    id: str
    kind: WorkoutKind
    description: str
    details: tuple[EntryDetail, ...]


def _fmt_number(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}"


def _fmt_raw(value: float) -> str:
    # 5.0 -> "5", 5.25 -> "5.25"
    return str(int(value)) if float(value).is_integer() else str(value)


def marker_label(record: WorkoutRecord) -> str:
    return f"{KIND_ICONS[record.kind]} {record.description}"


def marker_style(record: WorkoutRecord) -> str:
    return f"{record.kind}-popup"


def build_entry(record: WorkoutRecord) -> WorkoutEntry:
    details = [
        EntryDetail(KIND_ICONS[record.kind], record.distance_km, _fmt_raw(record.distance_km), "km"),
        EntryDetail("⏱", record.duration_min, _fmt_raw(record.duration_min), "min"),
    ]
    if isinstance(record, RunningWorkout):
        details += [
            EntryDetail("⚡️", record.pace_min_per_km, _fmt_number(record.pace_min_per_km), "min/km"),
            EntryDetail("🦶🏼", record.cadence_spm, _fmt_raw(record.cadence_spm), "spm"),
        ]
    elif isinstance(record, CyclingWorkout):
        details += [
            EntryDetail("⚡️", record.speed_km_per_h, _fmt_number(record.speed_km_per_h), "km/h"),
            EntryDetail("⛰", record.elevation_gain_m, _fmt_raw(record.elevation_gain_m), "m"),
        ]
    return WorkoutEntry(
        id=record.id,
        kind=record.kind,
        description=record.description,
        details=tuple(details),
    )
