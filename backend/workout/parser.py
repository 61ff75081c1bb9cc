"""Workout form parser (raw text fields to validated numbers)."""

from __future__ import annotations

import math
from dataclasses import dataclass

from backend.workout.model import WORKOUT_KINDS, WorkoutKind

_EXTRA_FIELD_BY_KIND: dict[str, str] = {
    "running": "Cadence",
    "cycling": "Elevation gain",
}


class WorkoutInputError(ValueError):
    """Raised when a form field is not a finite positive number."""


@dataclass(frozen=True)
class WorkoutInput:
    kind: WorkoutKind
    distance_km: float
    duration_min: float
    extra: float


def parse_number(raw: object) -> float:
    """Loose numeric coercion of a form field.

    Blank input coerces to 0.0 so it fails the positivity check like any other
    non-positive value.
    """
    if raw is None:
        return 0.0
    if isinstance(raw, bool):
        raise WorkoutInputError(f"invalid number {raw!r}")
    if isinstance(raw, (int, float)):
        return float(raw)

    text = str(raw).strip()
    if text == "":
        return 0.0
    if "_" in text:
        raise WorkoutInputError(f"invalid number {raw!r}")
    try:
        return float(text)
    except ValueError:
        pass
    if text[:2].lower() in ("0x", "0o", "0b"):
        try:
            return float(int(text, 0))
        except ValueError as exc:
            raise WorkoutInputError(f"invalid number {raw!r}") from exc
    raise WorkoutInputError(f"invalid number {raw!r}")


def parse_positive(raw: object, field_name: str) -> float:
    try:
        value = parse_number(raw)
    except WorkoutInputError as exc:
        raise WorkoutInputError(f"{field_name} must be a positive number") from exc
    if not math.isfinite(value) or value <= 0:
        raise WorkoutInputError(f"{field_name} must be a positive number")
    return value


def parse_workout_form(
    kind: str,
    distance_raw: object,
    duration_raw: object,
    extra_raw: object,
) -> WorkoutInput:
    if kind not in WORKOUT_KINDS:
        raise WorkoutInputError(f"Unknown workout type '{kind}'")

    distance_km = parse_positive(distance_raw, "Distance")
    duration_min = parse_positive(duration_raw, "Duration")
    # Elevation gain goes through the same positive-only rule as every other field.
    extra = parse_positive(extra_raw, _EXTRA_FIELD_BY_KIND[kind])

    return WorkoutInput(
        kind=kind,  # type: ignore[arg-type]
        distance_km=distance_km,
        duration_min=duration_min,
        extra=extra,
    )
