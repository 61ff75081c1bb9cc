"""NiceGUI web UI for the workout map."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from loguru import logger
from nicegui import Client, events, ui

from backend.core.config import SessionConfig
from backend.core.ports import GeolocationUnavailableError, MapClickHandler
from backend.core.session import SessionStore
from backend.workout.model import (
    DEFAULT_DATE_LOCALE,
    WORKOUT_KINDS,
    Coordinates,
    DateLocale,
    WorkoutKind,
)
from backend.workout.render import WorkoutEntry
from backend.workout.storage import JsonFileStorage, WorkoutRepository

TILE_URL = "https://{s}.tile.openstreetmap.fr/hot/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)
JS_TIMEOUT_SEC = 5.0

_GEOLOCATION_JS = """
(async () => {
  if (!navigator.geolocation) { return null; }
  return await new Promise((resolve) => {
    navigator.geolocation.getCurrentPosition(
      (p) => resolve({latitude: p.coords.latitude, longitude: p.coords.longitude}),
      () => resolve(null),
    );
  });
})()
"""

_MONTH_NAMES_JS = """
(() => {
  const tag = navigator.language || 'en-US';
  const fmt = new Intl.DateTimeFormat(tag, {month: 'long'});
  const months = [];
  for (let m = 0; m < 12; m++) { months.push(fmt.format(new Date(2000, m, 15))); }
  return {tag: tag, months: months, offset: -new Date().getTimezoneOffset()};
})()
"""


class BrowserGeolocation:
    def __init__(self, client: Client, timeout_sec: float | None) -> None:
        self._client = client
        self._timeout_sec = timeout_sec

    async def get_current_position(self) -> Coordinates:
        # Without a timeout, a silently denied permission prompt would never answer.
        timeout = self._timeout_sec if self._timeout_sec is not None else 3600.0
        try:
            result = await self._client.run_javascript(_GEOLOCATION_JS, timeout=timeout)
        except TimeoutError as exc:
            raise GeolocationUnavailableError("browser did not answer") from exc
        if not result:
            raise GeolocationUnavailableError("permission denied or not supported")
        return (float(result["latitude"]), float(result["longitude"]))


async def read_browser_locale() -> DateLocale:
    try:
        result = await ui.run_javascript(_MONTH_NAMES_JS, timeout=JS_TIMEOUT_SEC)
        return DateLocale(
            tag=str(result["tag"]),
            month_names=tuple(result["months"]),
            utc_offset_min=int(result["offset"]),
        )
    except (TimeoutError, KeyError, TypeError, ValueError) as exc:
        logger.debug(f"Browser locale unavailable, using {DEFAULT_DATE_LOCALE.tag}: {exc!r}")
        return DEFAULT_DATE_LOCALE


def _default_leaflet(center: Coordinates, zoom: int) -> Any:
    return ui.leaflet(center=center, zoom=zoom).classes("w-full h-[75vh]")


class LeafletMap:
    """Map widget backed by ``ui.leaflet``.

    Layer methods sent before the browser reports ``init`` are dropped by
    NiceGUI, so marker popups and pans wait in ``_pending`` until then.
    """

    def __init__(
        self,
        container: ui.element,
        map_factory: Callable[[Coordinates, int], Any] = _default_leaflet,
    ) -> None:
        self._container = container
        self._map_factory = map_factory
        self._map: Any = None
        self._handlers: list[MapClickHandler] = []
        self._pending: list[Callable[[Any], None]] = []

    def initialize(self, center: Coordinates, zoom: int) -> None:
        self._container.clear()
        with self._container:
            self._map = self._map_factory(center, zoom)
        self._map.clear_layers()
        self._map.tile_layer(url_template=TILE_URL, options={"attribution": TILE_ATTRIBUTION})
        self._map.on("map-click", self._handle_click)
        self._map.on("init", self._flush_pending)

    def on_click(self, handler: MapClickHandler) -> None:
        self._handlers.append(handler)

    def _handle_click(self, e: events.GenericEventArguments) -> None:
        latlng = e.args["latlng"]
        coords = (float(latlng["lat"]), float(latlng["lng"]))
        for handler in self._handlers:
            handler(coords)

    def _when_ready(self, call: Callable[[Any], None]) -> None:
        if self._map is None:
            raise RuntimeError("Map used before initialize()")
        if self._map.is_initialized:
            call(self._map)
        else:
            self._pending.append(call)

    def _flush_pending(self, _: Any = None) -> None:
        pending, self._pending = self._pending, []
        for call in pending:
            call(self._map)

    def add_marker(self, coords: Coordinates, popup_label: str, style_hint: str) -> None:
        options = {
            "maxWidth": 250,
            "minWidth": 100,
            "autoClose": False,
            "closeOnClick": False,
            "className": style_hint,
        }

        def _add(leaflet: Any) -> None:
            marker = leaflet.marker(latlng=coords)
            marker.run_method("bindPopup", popup_label, options)
            marker.run_method("openPopup")

        self._when_ready(_add)

    def pan_to(self, coords: Coordinates, zoom: int, animate: bool = True) -> None:
        self._when_ready(
            lambda leaflet: leaflet.run_map_method(
                "setView", list(coords), zoom, {"animate": animate, "pan": {"duration": 1}}
            )
        )


class WorkoutListView:
    def __init__(self, container: ui.element, on_select: Callable[[str], Any]) -> None:
        self._container = container
        self._on_select = on_select

    def append_entry(self, entry: WorkoutEntry) -> None:
        with self._container:
            card = ui.card().classes(f"w-full wm-card wm-{entry.kind} cursor-pointer")
            with card:
                ui.label(entry.description).classes("text-base font-semibold")
                with ui.row().classes("w-full gap-4"):
                    for detail in entry.details:
                        with ui.row().classes("items-baseline gap-1"):
                            ui.label(detail.icon)
                            ui.label(detail.text).classes("font-bold")
                            ui.label(detail.unit.upper()).classes("text-xs wm-muted")
        card.on("click", lambda _, wid=entry.id: self._on_select(wid))
        # Newest first.
        card.move(target_index=0)


class WorkoutFormView:
    def __init__(
        self,
        on_submit: Callable[[str, Any, Any, Any], Any],
        on_kind_change: Callable[[WorkoutKind], Any],
    ) -> None:
        self._on_submit = on_submit
        with ui.card().classes("w-full wm-card") as self.card:
            with ui.row().classes("w-full items-end gap-2"):
                self.kind = ui.select(
                    {k: k.capitalize() for k in WORKOUT_KINDS}, value="running", label="Type"
                )
                self.distance = ui.input("Distance", placeholder="km")
                self.duration = ui.input("Duration", placeholder="min")
                self.cadence = ui.input("Cadence", placeholder="step/min")
                self.elevation = ui.input("Elev Gain", placeholder="meters")
                submit_btn = ui.button("OK")
        self.elevation.set_visibility(False)
        self.card.set_visibility(False)

        self.kind.on_value_change(lambda e: on_kind_change(e.value))
        submit_btn.on_click(self._submit)
        for field in (self.distance, self.duration, self.cadence, self.elevation):
            field.on("keydown.enter", self._submit)

    def _submit(self) -> None:
        kind = str(self.kind.value)
        extra = self.cadence.value if kind == "running" else self.elevation.value
        self._on_submit(kind, self.distance.value, self.duration.value, extra)

    def show(self) -> None:
        self.card.set_visibility(True)
        self.distance.run_method("focus")

    def hide(self) -> None:
        for field in (self.distance, self.duration, self.cadence, self.elevation):
            field.value = ""
        self.card.set_visibility(False)

    def show_extra_field(self, kind: WorkoutKind) -> None:
        self.cadence.set_visibility(kind == "running")
        self.elevation.set_visibility(kind == "cycling")


class BrowserHost:
    def alert(self, message: str) -> None:
        with ui.dialog() as dialog, ui.card():
            ui.label(message)
            ui.button("OK", on_click=dialog.close)
        dialog.open()

    def warn(self, message: str) -> None:
        ui.notify(message, type="warning")

    def reload(self) -> None:
        ui.navigate.reload()


def run_web_ui(
    *,
    host: str = "127.0.0.1",
    port: int = 8088,
    data_file: Path | None = None,
    config: SessionConfig | None = None,
) -> int:
    session_config = config or SessionConfig()
    storage = JsonFileStorage(data_file)

    @ui.page("/")
    async def index() -> None:
        ui.add_head_html(
            """
            <style>
              .wm-card { border-radius: 10px; border-left: 5px solid #94a3b8; }
              .wm-running { border-left-color: #00c46a; }
              .wm-cycling { border-left-color: #ffb545; }
              .wm-muted { color: #64748b; }
              .running-popup .leaflet-popup-content-wrapper { border-left: 5px solid #00c46a; }
              .cycling-popup .leaflet-popup-content-wrapper { border-left: 5px solid #ffb545; }
            </style>
            """
        )
        session: SessionStore | None = None

        def on_select(workout_id: str) -> None:
            if session is not None:
                session.on_list_entry_selected(workout_id)

        def on_submit(kind: str, distance: Any, duration: Any, extra: Any) -> None:
            if session is not None:
                session.on_form_submitted(kind, distance, duration, extra)

        def on_kind_change(kind: WorkoutKind) -> None:
            if session is not None:
                session.on_kind_changed(kind)

        def on_reset() -> None:
            if session is not None:
                session.reset_all()

        with ui.row().classes("w-full no-wrap gap-4"):
            with ui.column().classes("w-1/3 gap-2"):
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label("Workout Map").classes("text-xl font-semibold")
                    ui.button("Reset", on_click=on_reset).props("outline color=negative")
                form = WorkoutFormView(on_submit, on_kind_change)
                list_container = ui.column().classes("w-full gap-2")
            map_container = ui.column().classes("w-2/3")
            with map_container:
                ui.label("Waiting for your position...").classes("wm-muted")

        client = ui.context.client
        await client.connected()
        session = SessionStore(
            geolocation=BrowserGeolocation(client, session_config.geolocation_timeout_sec),
            map_widget=LeafletMap(map_container),
            list_renderer=WorkoutListView(list_container, on_select),
            form=form,
            host=BrowserHost(),
            repository=WorkoutRepository(storage, key=session_config.storage_key),
            config=session_config,
            date_locale=await read_browser_locale(),
        )
        await session.initialize()

    ui.run(host=host, port=port, reload=False, title="Workout Map")
    return 0
