"""Mutable per-session state for the workout map."""

from __future__ import annotations

from dataclasses import dataclass

from backend.workout.model import Coordinates


@dataclass
class SessionState:
    pending_location: Coordinates | None = None
    form_visible: bool = False
    map_ready: bool = False
