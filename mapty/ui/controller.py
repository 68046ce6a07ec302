"""Workout controller driven by map, form and list events."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Literal

from mapty.ui.gateway import RenderGateway
from mapty.workout.metrics import InvalidInputError, build_workout, new_workout_id
from mapty.workout.model import WORKOUT_KINDS, Coords, Workout
from mapty.workout.store import PersistenceUnavailableError, WorkoutStore

logger = logging.getLogger(__name__)

ControllerState = Literal["idle", "awaiting_input"]


@dataclass(frozen=True)
class FormValues:
    """Raw form fields as typed by the user (strings or numbers)."""

    kind: str
    distance: object
    duration: object
    cadence: object = None
    elevation_gain: object = None


class WorkoutController:
    def __init__(
        self,
        store: WorkoutStore,
        gateway: RenderGateway,
        *,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = new_workout_id,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._clock = clock
        self._id_factory = id_factory
        self._state: ControllerState = "idle"
        self._pending_coords: Coords | None = None
        self._restored = False
        self._map_ready = False

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def pending_coords(self) -> Coords | None:
        return self._pending_coords

    @property
    def map_ready(self) -> bool:
        return self._map_ready

    @property
    def store(self) -> WorkoutStore:
        return self._store

    def restore(self) -> tuple[Workout, ...]:
        """Load stored workouts once and render their list entries."""
        if self._restored:
            return self._store.workouts
        restored = self._store.rehydrate()
        self._restored = True
        for workout in restored:
            self._gateway.append_list_item(workout)
        return restored

    def bootstrap(self) -> None:
        """Place markers for every stored workout once the map exists."""
        self.restore()
        if self._map_ready:
            return
        self._map_ready = True
        for workout in self._store:
            self._gateway.place_marker(workout.coords, workout.kind, workout.description)

    def on_map_clicked(self, coords: Coords) -> None:
        lat, lng = coords
        self._pending_coords = (float(lat), float(lng))
        self._state = "awaiting_input"
        self._gateway.show_form()

    def submit(self, form: FormValues) -> Workout:
        if self._pending_coords is None:
            raise InvalidInputError("Click on the map to choose a workout location first")

        kind = str(form.kind or "").strip().lower()
        if kind not in WORKOUT_KINDS:
            raise InvalidInputError(f"Unknown workout type '{form.kind}'")
        distance = _parse_float_field(form.distance, "distance")
        duration = _parse_float_field(form.duration, "duration")
        if kind == "running":
            variant_value = _parse_float_field(form.cadence, "cadence")
        else:
            variant_value = _parse_float_field(form.elevation_gain, "elevation gain")

        workout = build_workout(
            kind,
            self._pending_coords,
            distance,
            duration,
            variant_value,
            created_at=self._clock(),
            workout_id=self._next_id(),
        )

        self._store.append(workout)
        persist_error: PersistenceUnavailableError | None = None
        try:
            self._store.persist()
        except PersistenceUnavailableError as exc:
            logger.warning("Workout %s kept in memory only: %s", workout.id, exc)
            persist_error = exc

        self._gateway.place_marker(workout.coords, workout.kind, workout.description)
        self._gateway.append_list_item(workout)
        self._pending_coords = None
        self._state = "idle"
        self._gateway.hide_form()

        if persist_error is not None:
            self._gateway.alert("Workout added, but it could not be saved for next time")
        return workout

    def on_form_submitted(self, form: FormValues) -> Workout | None:
        try:
            return self.submit(form)
        except InvalidInputError as exc:
            self._gateway.alert(str(exc))
            return None

    def select_existing(self, workout_id: str) -> None:
        workout = self._store.find_by_id(workout_id)
        if workout is None:
            logger.debug("List item %s has no matching workout", workout_id)
            return
        self._gateway.center_on(workout.coords)

    def on_list_item_activated(self, workout_id: str) -> None:
        self.select_existing(workout_id)

    def reset(self) -> None:
        """Drop every workout, in memory and in storage."""
        try:
            self._store.reset()
        except PersistenceUnavailableError as exc:
            logger.warning("Stored workouts could not be cleared: %s", exc)
            self._gateway.alert("Workouts cleared for this session, but storage could not be reset")
        self._pending_coords = None
        self._state = "idle"
        self._gateway.hide_form()
        self._gateway.clear_workouts()

    def _next_id(self) -> str:
        ident = self._id_factory()
        while self._store.find_by_id(ident) is not None:
            ident = self._id_factory()
        return ident


def _parse_float_field(raw: object, field_name: str) -> float:
    if raw is None or (isinstance(raw, str) and raw.strip() == ""):
        raise InvalidInputError(f"{field_name.capitalize()} is required")
    if isinstance(raw, bool):
        raise InvalidInputError(f"Invalid {field_name}")
    try:
        return float(str(raw).strip())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid {field_name}: {raw}") from exc
