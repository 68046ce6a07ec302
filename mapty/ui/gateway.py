"""Render commands issued by the workout controller."""

from __future__ import annotations

from typing import Protocol

from mapty.workout.model import Coords, Workout, WorkoutKind


class RenderGateway(Protocol):
    """Sink implemented by the map/list UI. Every command is fire-and-forget."""

    def place_marker(self, coords: Coords, kind: WorkoutKind, description: str) -> None: ...

    def append_list_item(self, workout: Workout) -> None: ...

    def center_on(self, coords: Coords) -> None: ...

    def show_form(self) -> None: ...

    def hide_form(self) -> None: ...

    def clear_workouts(self) -> None: ...

    def alert(self, message: str) -> None: ...
