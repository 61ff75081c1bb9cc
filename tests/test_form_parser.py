from __future__ import annotations

import pytest

from backend.workout.parser import (
    WorkoutInputError,
    parse_number,
    parse_positive,
    parse_workout_form,
)


def test_parse_workout_form_running() -> None:
    values = parse_workout_form("running", "5", " 30 ", "150")

    assert values.kind == "running"
    assert values.distance_km == 5.0
    assert values.duration_min == 30.0
    assert values.extra == 150.0


def test_parse_number_loose_coercion() -> None:
    assert parse_number("") == 0.0
    assert parse_number("   ") == 0.0
    assert parse_number(None) == 0.0
    assert parse_number("2.5") == 2.5
    assert parse_number("1e3") == 1000.0
    assert parse_number("0x10") == 16.0
    assert parse_number(7) == 7.0


@pytest.mark.parametrize("raw", ["abc", "1,5", "5km", "1_000", "0xZZ"])
def test_parse_number_rejects_text(raw: str) -> None:
    with pytest.raises(WorkoutInputError):
        parse_number(raw)


@pytest.mark.parametrize("raw", ["0", "-3", "", "abc", "nan", "inf", "-Infinity"])
def test_parse_positive_rejects_non_positive_or_non_finite(raw: str) -> None:
    with pytest.raises(WorkoutInputError) as exc_info:
        parse_positive(raw, "Distance")
    assert "Distance" in str(exc_info.value)


def test_elevation_gain_must_be_positive_in_form() -> None:
    with pytest.raises(WorkoutInputError) as exc_info:
        parse_workout_form("cycling", "20", "60", "0")
    assert "Elevation gain" in str(exc_info.value)


def test_unknown_kind_rejected() -> None:
    with pytest.raises(WorkoutInputError):
        parse_workout_form("rowing", "5", "30", "150")
