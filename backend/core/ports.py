"""Collaborators the session store talks to."""

from __future__ import annotations

from typing import Callable, Protocol

from backend.workout.model import Coordinates, WorkoutKind
from backend.workout.render import WorkoutEntry

MapClickHandler = Callable[[Coordinates], None]


class GeolocationUnavailableError(RuntimeError):
    """Raised when the environment cannot report the current position."""


class GeolocationProvider(Protocol):
    async def get_current_position(self) -> Coordinates:
        """Return (lat, lng) or raise GeolocationUnavailableError."""
        ...


class MapWidget(Protocol):
    def initialize(self, center: Coordinates, zoom: int) -> None: ...

    def on_click(self, handler: MapClickHandler) -> None: ...

    def add_marker(self, coords: Coordinates, popup_label: str, style_hint: str) -> None: ...

    def pan_to(self, coords: Coordinates, zoom: int, animate: bool = True) -> None: ...


class ListRenderer(Protocol):
    def append_entry(self, entry: WorkoutEntry) -> None: ...


class WorkoutForm(Protocol):
    def show(self) -> None:
        """Reveal the form with the distance field focused."""
        ...

    def hide(self) -> None:
        """Clear all four inputs and hide the form."""
        ...

    def show_extra_field(self, kind: WorkoutKind) -> None:
        """Show cadence for running, elevation gain for cycling."""
        ...


class SessionHost(Protocol):
    def alert(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def reload(self) -> None: ...
