"""NiceGUI web UI for Mapty."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from nicegui import Client, ui

from mapty.ui.controller import FormValues, WorkoutController
from mapty.ui.formatting import popup_class, workout_details
from mapty.workout.model import Coords, Workout, WorkoutKind
from mapty.workout.store import FileSlotStorage, WorkoutStore

DEFAULT_CENTER: Coords = (51.505, -0.09)
GEOLOCATION_TIMEOUT_SEC = 30.0

_GEOLOCATE_JS = """
return await new Promise((resolve) => {
  if (!navigator.geolocation) {
    resolve(null);
    return;
  }
  navigator.geolocation.getCurrentPosition(
    (position) => resolve([position.coords.latitude, position.coords.longitude]),
    () => resolve(null),
  );
});
"""

_STYLE = """
<style>
  .mp-sidebar { background: #2d3439; color: #ececec; }
  .mp-workout { background: #42484d; border-radius: 6px; cursor: pointer; }
  .mp-workout--running { border-left: 5px solid #00c46a; }
  .mp-workout--cycling { border-left: 5px solid #ffb545; }
  .running-popup .leaflet-popup-content-wrapper { border-left: 5px solid #00c46a; }
  .cycling-popup .leaflet-popup-content-wrapper { border-left: 5px solid #ffb545; }
</style>
"""


class _WebGateway:
    """Renders controller commands into the Leaflet map and the sidebar list."""

    def __init__(self, zoom: int, on_item_click: Callable[[str], None]) -> None:
        self.zoom = zoom
        self.on_item_click = on_item_click
        self.map: Any = None
        self.form: Any = None
        self.list_column: Any = None
        self.on_form_hidden: Any = None
        self._markers: list[Any] = []

    def place_marker(self, coords: Coords, kind: WorkoutKind, description: str) -> None:
        marker = self.map.marker(latlng=coords)
        marker.run_method(
            "bindPopup",
            description,
            {
                "autoClose": False,
                "closeOnClick": False,
                "className": popup_class(kind),
            },
        )
        marker.run_method("openPopup")
        self._markers.append(marker)

    def append_list_item(self, workout: Workout) -> None:
        with self.list_column:
            with ui.card().classes(
                f"w-full mp-workout mp-workout--{workout.kind}"
            ) as card:
                ui.label(workout.description).classes("text-base font-semibold")
                with ui.row().classes("w-full gap-4"):
                    for icon, value, unit in workout_details(workout):
                        ui.label(f"{icon} {value} {unit}").classes("text-sm")
        card.on("click", lambda _, workout_id=workout.id: self.on_item_click(workout_id))
        # Newest entries sit at the top of the sidebar.
        card.move(self.list_column, target_index=0)

    def center_on(self, coords: Coords) -> None:
        self.map.run_map_method(
            "setView",
            list(coords),
            self.zoom,
            {"animate": True, "pan": {"duration": 1}},
        )

    def show_form(self) -> None:
        self.form.set_visibility(True)

    def hide_form(self) -> None:
        self.form.set_visibility(False)
        if self.on_form_hidden is not None:
            self.on_form_hidden()

    def clear_workouts(self) -> None:
        for marker in self._markers:
            self.map.remove_layer(marker)
        self._markers.clear()
        self.list_column.clear()

    def alert(self, message: str) -> None:
        ui.notify(message, color="negative")


def run_web_ui(
    *,
    storage_dir: Path | None = None,
    host: str = "127.0.0.1",
    port: int = 8089,
    zoom: int = 13,
) -> int:
    @ui.page("/")
    async def index(client: Client) -> None:
        gateway = _WebGateway(
            zoom=zoom,
            on_item_click=lambda workout_id: controller.on_list_item_activated(workout_id),
        )
        controller = WorkoutController(WorkoutStore(FileSlotStorage(storage_dir)), gateway)

        ui.add_head_html(_STYLE)
        with ui.row().classes("w-full h-screen no-wrap gap-0"):
            with ui.column().classes("mp-sidebar h-full p-4 gap-3").style("width: 28rem"):
                ui.label("Mapty").classes("text-2xl font-bold")
                with ui.card().classes("w-full gap-2") as form:
                    kind_select = ui.select(
                        {"running": "Running", "cycling": "Cycling"},
                        value="running",
                        label="Type",
                    ).classes("w-full")
                    distance_input = ui.number(label="Distance", placeholder="km").classes("w-full")
                    duration_input = ui.number(label="Duration", placeholder="min").classes("w-full")
                    cadence_input = ui.number(label="Cadence", placeholder="step/min").classes("w-full")
                    elevation_input = ui.number(label="Elev Gain", placeholder="meters").classes("w-full")
                    cadence_input.bind_visibility_from(kind_select, "value", value="running")
                    elevation_input.bind_visibility_from(kind_select, "value", value="cycling")
                    submit_btn = ui.button("OK").props("color=positive")
                form.set_visibility(False)
                list_column = ui.column().classes("w-full gap-2")
                reset_btn = ui.button("Reset workouts").props("outline color=white")
            workout_map = ui.leaflet(center=DEFAULT_CENTER, zoom=zoom).classes("h-full grow")

        with ui.dialog() as confirm_dialog, ui.card():
            ui.label("Delete every workout? This cannot be undone.")
            with ui.row().classes("gap-2"):
                confirm_btn = ui.button("Delete all").props("color=negative")
                cancel_btn = ui.button("Cancel")

        gateway.map = workout_map
        gateway.form = form
        gateway.list_column = list_column

        def clear_form() -> None:
            for field in (distance_input, duration_input, cadence_input, elevation_input):
                field.value = None

        gateway.on_form_hidden = clear_form

        def on_map_click(event: Any) -> None:
            if not controller.map_ready:
                return
            latlng = event.args["latlng"]
            controller.on_map_clicked((latlng["lat"], latlng["lng"]))
            distance_input.run_method("focus")

        def on_submit() -> None:
            controller.on_form_submitted(
                FormValues(
                    kind=str(kind_select.value),
                    distance=distance_input.value,
                    duration=duration_input.value,
                    cadence=cadence_input.value,
                    elevation_gain=elevation_input.value,
                )
            )

        def on_confirm_reset() -> None:
            confirm_dialog.close()
            controller.reset()
            ui.notify("All workouts deleted", color="positive")

        workout_map.on("map-click", on_map_click)
        submit_btn.on_click(on_submit)
        for field in (distance_input, duration_input, cadence_input, elevation_input):
            field.on("keydown.enter", on_submit)
        reset_btn.on_click(confirm_dialog.open)
        confirm_btn.on_click(on_confirm_reset)
        cancel_btn.on_click(confirm_dialog.close)

        # The list does not need the map, so it is filled before geolocation.
        controller.restore()

        await client.connected()
        try:
            position = await ui.run_javascript(_GEOLOCATE_JS, timeout=GEOLOCATION_TIMEOUT_SEC)
        except TimeoutError:
            position = None
        if not position:
            ui.notify("Sorry, unable to fetch your location", color="negative")
            return
        workout_map.set_center((float(position[0]), float(position[1])))
        controller.bootstrap()

    ui.run(host=host, port=port, reload=False, title="Mapty")
    return 0
