"""Workout domain models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import ClassVar, Literal, Union
from uuid import uuid4

WorkoutKind = Literal["running", "cycling"]
WORKOUT_KINDS: tuple[WorkoutKind, ...] = ("running", "cycling")

# (latitude, longitude)
Coordinates = tuple[float, float]

ENGLISH_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


class WorkoutValueError(ValueError):
    """Raised when a workout would be built from out-of-range values."""


@dataclass(frozen=True)
class DateLocale:
    tag: str
    month_names: tuple[str, ...]
    # Viewer offset from UTC in minutes; None uses the server clock zone.
    utc_offset_min: int | None = None

    def __post_init__(self) -> None:
        if len(self.month_names) != 12:
            raise ValueError(f"Locale {self.tag!r} must define 12 month names")

    def now(self) -> datetime:
        if self.utc_offset_min is None:
            return datetime.now().astimezone()
        return datetime.now(timezone(timedelta(minutes=self.utc_offset_min)))


DEFAULT_DATE_LOCALE = DateLocale(tag="en-US", month_names=ENGLISH_MONTH_NAMES)


@dataclass(frozen=True)
class _WorkoutBase:
    id: str
    created_at: datetime
    coords: Coordinates
    distance_km: float
    duration_min: float
    description: str


@dataclass(frozen=True)
class RunningWorkout(_WorkoutBase):
    kind: ClassVar[WorkoutKind] = "running"

    cadence_spm: float
    pace_min_per_km: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pace_min_per_km", self.duration_min / self.distance_km)


@dataclass(frozen=True)
class CyclingWorkout(_WorkoutBase):
    kind: ClassVar[WorkoutKind] = "cycling"

    elevation_gain_m: float
    speed_km_per_h: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "speed_km_per_h", self.distance_km / (self.duration_min / 60)
        )


WorkoutRecord = Union[RunningWorkout, CyclingWorkout]


def new_workout_id() -> str:
    return uuid4().hex


def describe(
    kind: WorkoutKind,
    created_at: datetime,
    date_locale: DateLocale = DEFAULT_DATE_LOCALE,
) -> str:
    """Human label such as ``"Running on October 05"``."""
    month = date_locale.month_names[created_at.month - 1]
    return f"{kind[:1].upper()}{kind[1:]} on {month} {created_at.day:02d}"


def _require_positive(value: float, field_name: str) -> float:
    if not math.isfinite(value) or value <= 0:
        raise WorkoutValueError(f"{field_name} must be a positive number, got {value!r}")
    return value


def create_workout(
    kind: str,
    coords: Coordinates,
    distance_km: float,
    duration_min: float,
    extra: float,
    *,
    created_at: datetime | None = None,
    workout_id: str | None = None,
    date_locale: DateLocale | None = None,
) -> WorkoutRecord:
    """Build a validated workout and cache its description and derived metric.

    ``extra`` is the cadence (steps/min) for running and the elevation gain (m)
    for cycling. Elevation gain may be zero or negative here; the form parser
    applies the stricter positive-only rule.
    """
    _require_positive(distance_km, "distance_km")
    _require_positive(duration_min, "duration_min")
    lat, lng = coords
    locale = date_locale or DEFAULT_DATE_LOCALE
    stamp = created_at or locale.now()
    wid = workout_id or new_workout_id()

    if kind == "running":
        _require_positive(extra, "cadence_spm")
        return RunningWorkout(
            id=wid,
            created_at=stamp,
            coords=(float(lat), float(lng)),
            distance_km=distance_km,
            duration_min=duration_min,
            description=describe("running", stamp, locale),
            cadence_spm=extra,
        )
    if kind == "cycling":
        if not math.isfinite(extra):
            raise WorkoutValueError(f"elevation_gain_m must be finite, got {extra!r}")
        return CyclingWorkout(
            id=wid,
            created_at=stamp,
            coords=(float(lat), float(lng)),
            distance_km=distance_km,
            duration_min=duration_min,
            description=describe("cycling", stamp, locale),
            elevation_gain_m=extra,
        )
    raise WorkoutValueError(f"Unknown workout kind {kind!r}")


class InteractionCounts:
    """Click counts per workout id, kept beside the frozen records."""

    def __init__(self, counts: dict[str, int] | None = None) -> None:
        self._counts: dict[str, int] = dict(counts or {})

    def register(self, workout_id: str) -> int:
        self._counts[workout_id] = self._counts.get(workout_id, 0) + 1
        return self._counts[workout_id]

    def get(self, workout_id: str) -> int:
        return self._counts.get(workout_id, 0)

    def as_dict(self) -> dict[str, int]:
        return dict(self._counts)

    def clear(self) -> None:
        self._counts.clear()


def register_interaction(counts: InteractionCounts, record: WorkoutRecord) -> int:
    return counts.register(record.id)
