"""Plain-data encoding of workout records."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any

from mapty.workout.metrics import InvalidInputError, build_workout
from mapty.workout.model import Running, Workout


class WorkoutDecodeError(ValueError):
    """Raised when a stored workout entry cannot be turned back into a record."""


def encode_workout(workout: Workout) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "kind": workout.kind,
        "id": workout.id,
        "created_at": workout.created_at.isoformat(),
        "coords": [workout.coords[0], workout.coords[1]],
        "distance_km": workout.distance_km,
        "duration_min": workout.duration_min,
        "description": workout.description,
    }
    if isinstance(workout, Running):
        payload["cadence_spm"] = workout.cadence_spm
        payload["pace_min_per_km"] = workout.pace_min_per_km
    else:
        payload["elevation_gain_m"] = workout.elevation_gain_m
        payload["speed_km_per_h"] = workout.speed_km_per_h
    return payload


def decode_workout(raw: object) -> Workout:
    """Rebuild a record from its stored form.

    The variant comes from the ``kind`` tag and the derived metric is
    recomputed from distance and duration, so the stored pace/speed values
    are never trusted. The stored description is kept as-is.
    """
    if not isinstance(raw, dict):
        raise WorkoutDecodeError("Workout entry must be an object")

    kind = raw.get("kind")
    if kind == "running":
        variant_value = _parse_number_field(raw, "cadence_spm")
    elif kind == "cycling":
        variant_value = _parse_number_field(raw, "elevation_gain_m")
    else:
        raise WorkoutDecodeError(f"Unknown workout kind {kind!r}")

    ident = raw.get("id")
    if not isinstance(ident, str) or not ident:
        raise WorkoutDecodeError("Workout field 'id' must be a non-empty string")

    try:
        workout = build_workout(
            kind,
            _parse_coords(raw.get("coords")),
            _parse_number_field(raw, "distance_km"),
            _parse_number_field(raw, "duration_min"),
            variant_value,
            created_at=_parse_timestamp(raw.get("created_at")),
            workout_id=ident,
        )
    except InvalidInputError as exc:
        raise WorkoutDecodeError(f"Workout {ident}: {exc}") from exc

    description = raw.get("description")
    if isinstance(description, str) and description.strip():
        workout = replace(workout, description=description)
    return workout


def _parse_number_field(raw: dict[str, Any], field_name: str) -> float:
    value = raw.get(field_name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise WorkoutDecodeError(f"Workout field '{field_name}' must be a number")
    return value


def _parse_coords(value: object) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise WorkoutDecodeError("Workout field 'coords' must be a [lat, lng] pair")
    lat, lng = value
    if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in (lat, lng)):
        raise WorkoutDecodeError("Workout field 'coords' must hold numbers")
    return lat, lng


def _parse_timestamp(value: object) -> datetime:
    if not isinstance(value, str):
        raise WorkoutDecodeError("Workout field 'created_at' must be an ISO timestamp")
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise WorkoutDecodeError(f"Invalid created_at timestamp: {value}") from exc
