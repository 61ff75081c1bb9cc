"""Local persistence for the workout log."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from loguru import logger

from backend.workout.model import (
    CyclingWorkout,
    InteractionCounts,
    RunningWorkout,
    WorkoutRecord,
)

WORKOUTS_KEY = "workouts"


def _default_storage_path() -> Path:
    return Path.home() / ".workout-map" / "storage.json"


class StorageError(RuntimeError):
    """Raised when the storage backend cannot be read or written."""


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process backend for headless runs and tests."""

    def __init__(self, items: Mapping[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStorage:
    """String values kept in a single JSON object file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or _default_storage_path()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise StorageError(f"Invalid storage file {self.path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise StorageError(f"Invalid storage file {self.path}: not an object")
        return {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(items, ensure_ascii=True, indent=2), encoding="utf-8"
            )
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except StorageError as exc:
            logger.warning(f"Overwriting unreadable storage file: {exc}")
            items = {}
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)


@dataclass
class StoredWorkouts:
    records: list[WorkoutRecord] = field(default_factory=list)
    clicks: dict[str, int] = field(default_factory=dict)


def workout_to_snapshot(record: WorkoutRecord, clicks: int = 0) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": record.id,
        "kind": record.kind,
        "created_at": record.created_at.isoformat(),
        "coords": [record.coords[0], record.coords[1]],
        "distance_km": record.distance_km,
        "duration_min": record.duration_min,
        "description": record.description,
        "clicks": int(clicks),
    }
    if isinstance(record, RunningWorkout):
        payload["cadence_spm"] = record.cadence_spm
    else:
        payload["elevation_gain_m"] = record.elevation_gain_m
    return payload


def workout_from_snapshot(item: Mapping[str, Any]) -> tuple[WorkoutRecord, int]:
    """Rebuild a record from its snapshot; derived metrics are computed again."""
    lat, lng = item["coords"]
    common = {
        "id": str(item["id"]),
        "created_at": datetime.fromisoformat(item["created_at"]),
        "coords": (float(lat), float(lng)),
        "distance_km": float(item["distance_km"]),
        "duration_min": float(item["duration_min"]),
        "description": str(item["description"]),
    }
    if common["distance_km"] <= 0 or common["duration_min"] <= 0:
        raise ValueError("distance_km and duration_min must be > 0")

    kind = item["kind"]
    record: WorkoutRecord
    if kind == "running":
        record = RunningWorkout(cadence_spm=float(item["cadence_spm"]), **common)
    elif kind == "cycling":
        record = CyclingWorkout(elevation_gain_m=float(item["elevation_gain_m"]), **common)
    else:
        raise ValueError(f"Unknown workout kind {kind!r}")
    return record, int(item.get("clicks", 0))


class WorkoutRepository:
    def __init__(self, storage: KeyValueStorage, key: str = WORKOUTS_KEY) -> None:
        self._storage = storage
        self._key = key

    def save(
        self,
        records: Sequence[WorkoutRecord],
        clicks: InteractionCounts | Mapping[str, int] | None = None,
    ) -> str:
        counts = clicks.as_dict() if isinstance(clicks, InteractionCounts) else dict(clicks or {})
        blob = json.dumps(
            [workout_to_snapshot(r, counts.get(r.id, 0)) for r in records],
            ensure_ascii=True,
        )
        self._storage.set_item(self._key, blob)
        return blob

    def load(self) -> StoredWorkouts:
        try:
            blob = self._storage.get_item(self._key)
        except StorageError as exc:
            logger.warning(f"Workout storage unavailable, starting empty: {exc}")
            return StoredWorkouts()
        if not blob:
            return StoredWorkouts()

        try:
            items = json.loads(blob)
        except json.JSONDecodeError as exc:
            logger.warning(f"Corrupt workout data under '{self._key}', starting empty: {exc}")
            return StoredWorkouts()
        if not isinstance(items, list):
            logger.warning(f"Corrupt workout data under '{self._key}', starting empty")
            return StoredWorkouts()

        out = StoredWorkouts()
        seen: set[str] = set()
        for index, item in enumerate(items):
            try:
                record, clicks = workout_from_snapshot(item)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(f"Skipping malformed workout #{index}: {exc!r}")
                continue
            if record.id in seen:
                logger.warning(f"Skipping duplicate workout id {record.id}")
                continue
            seen.add(record.id)
            out.records.append(record)
            if clicks:
                out.clicks[record.id] = clicks
        return out

    def clear(self) -> None:
        self._storage.remove_item(self._key)
