"""Runtime settings for a workout map session."""

from __future__ import annotations

from dataclasses import dataclass

from backend.workout.storage import WORKOUTS_KEY


@dataclass(frozen=True)
class SessionConfig:
    map_zoom_level: int = 13
    storage_key: str = WORKOUTS_KEY
    # None waits for the browser indefinitely.
    geolocation_timeout_sec: float | None = 30.0
    debug: bool = False
