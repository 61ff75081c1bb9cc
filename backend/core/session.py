"""Session store mediating the map, the workout form, the list and storage."""

from __future__ import annotations

import asyncio

from loguru import logger

from backend.core.config import SessionConfig
from backend.core.ports import (
    GeolocationProvider,
    GeolocationUnavailableError,
    ListRenderer,
    MapWidget,
    SessionHost,
    WorkoutForm,
)
from backend.core.state import SessionState
from backend.workout.model import (
    Coordinates,
    DateLocale,
    InteractionCounts,
    WorkoutKind,
    WorkoutRecord,
    create_workout,
    register_interaction,
)
from backend.workout.parser import WorkoutInputError, parse_workout_form
from backend.workout.render import build_entry, marker_label, marker_style
from backend.workout.storage import StorageError, WorkoutRepository


class MissingPendingLocationError(RuntimeError):
    """Raised in debug mode when a workout is submitted before any map click."""


class SessionStore:
    def __init__(
        self,
        *,
        geolocation: GeolocationProvider,
        map_widget: MapWidget,
        list_renderer: ListRenderer,
        form: WorkoutForm,
        host: SessionHost,
        repository: WorkoutRepository,
        config: SessionConfig | None = None,
        date_locale: DateLocale | None = None,
    ) -> None:
        self._geolocation = geolocation
        self._map = map_widget
        self._list = list_renderer
        self._form = form
        self._host = host
        self._repository = repository
        self._config = config or SessionConfig()
        self.date_locale = date_locale
        self.state = SessionState()
        self._workouts: list[WorkoutRecord] = []
        self._clicks = InteractionCounts()

    @property
    def workouts(self) -> tuple[WorkoutRecord, ...]:
        return tuple(self._workouts)

    @property
    def pending_location(self) -> Coordinates | None:
        return self.state.pending_location

    @property
    def form_visible(self) -> bool:
        return self.state.form_visible

    @property
    def map_ready(self) -> bool:
        return self.state.map_ready

    def click_count(self, workout_id: str) -> int:
        return self._clicks.get(workout_id)

    def find(self, workout_id: str) -> WorkoutRecord | None:
        return next((w for w in self._workouts if w.id == workout_id), None)

    async def initialize(self) -> None:
        position_task = asyncio.ensure_future(self._geolocation.get_current_position())
        self._load_persisted()

        try:
            position = await asyncio.wait_for(
                position_task, timeout=self._config.geolocation_timeout_sec
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"No position after {self._config.geolocation_timeout_sec:.0f}s, map disabled"
            )
            self._host.alert("Could not get your position")
            return
        except GeolocationUnavailableError as exc:
            logger.warning(f"Geolocation unavailable, map disabled: {exc}")
            self._host.alert("Could not get your position")
            return

        self._load_map(position)

    def _load_persisted(self) -> None:
        stored = self._repository.load()
        self._workouts = list(stored.records)
        self._clicks = InteractionCounts(stored.clicks)
        for workout in self._workouts:
            self._list.append_entry(build_entry(workout))
            if self.state.map_ready:
                self._render_marker(workout)
        if self._workouts:
            logger.info(f"Loaded {len(self._workouts)} saved workouts")

    def _load_map(self, center: Coordinates) -> None:
        self._map.initialize(center, self._config.map_zoom_level)
        self._map.on_click(self.on_map_clicked)
        self.state.map_ready = True
        logger.info(f"Map ready at {center[0]:.5f},{center[1]:.5f}")
        for workout in self._workouts:
            self._render_marker(workout)

    def _render_marker(self, workout: WorkoutRecord) -> None:
        self._map.add_marker(workout.coords, marker_label(workout), marker_style(workout))

    def on_map_clicked(self, coords: Coordinates) -> None:
        self.state.pending_location = coords
        self.state.form_visible = True
        self._form.show()

    def on_kind_changed(self, kind: WorkoutKind) -> None:
        self._form.show_extra_field(kind)

    def on_form_submitted(
        self,
        kind: str,
        distance_raw: object,
        duration_raw: object,
        extra_raw: object,
    ) -> WorkoutRecord | None:
        try:
            values = parse_workout_form(kind, distance_raw, duration_raw, extra_raw)
        except WorkoutInputError as exc:
            logger.info(f"Rejected {kind} workout input: {exc}")
            self._host.alert(f"Inputs have to be positive numbers. {exc}")
            return None

        coords = self.state.pending_location
        if coords is None:
            if self._config.debug:
                raise MissingPendingLocationError("Workout submitted without a map click")
            logger.error("Workout submitted without a map click, ignoring")
            return None

        workout = create_workout(
            values.kind,
            coords,
            values.distance_km,
            values.duration_min,
            values.extra,
            date_locale=self.date_locale,
        )
        self._workouts.append(workout)
        logger.info(f"Created {workout.kind} workout {workout.id} at {coords}")

        if self.state.map_ready:
            self._render_marker(workout)
        self._list.append_entry(build_entry(workout))

        self._form.hide()
        self.state.form_visible = False
        self.state.pending_location = None

        self._persist()
        return workout

    def on_list_entry_selected(self, workout_id: str) -> int | None:
        workout = self.find(workout_id)
        if workout is None:
            logger.debug(f"Ignoring selection of unknown workout {workout_id}")
            return None
        if self.state.map_ready:
            self._map.pan_to(workout.coords, self._config.map_zoom_level, animate=True)
        count = register_interaction(self._clicks, workout)
        self._persist()
        return count

    def reset_all(self) -> None:
        try:
            self._repository.clear()
        except StorageError as exc:
            logger.warning(f"Could not clear saved workouts: {exc}")
            self._host.warn("Could not clear saved workouts")
        self._workouts.clear()
        self._clicks.clear()
        self.state = SessionState()
        logger.info("Session reset")
        self._host.reload()

    def _persist(self) -> None:
        try:
            self._repository.save(self._workouts, self._clicks)
        except StorageError as exc:
            logger.warning(f"Could not save workouts: {exc}")
            self._host.warn("Workouts could not be saved on this device")
