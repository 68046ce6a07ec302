"""Derived workout metrics and validated record construction."""

from __future__ import annotations

import math
from datetime import datetime
from uuid import uuid4

from mapty.workout.model import WORKOUT_KINDS, Coords, Cycling, Running, Workout, WorkoutKind

# Indexed by datetime.month - 1.
MONTHS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

WORKOUT_ID_LENGTH = 10


class InvalidInputError(ValueError):
    """Raised when workout input values are missing, non-finite or out of range."""


def compute_pace(distance_km: float, duration_min: float) -> float:
    return duration_min / distance_km


def compute_speed(distance_km: float, duration_min: float) -> float:
    return distance_km / (duration_min / 60)


def compute_metric(kind: WorkoutKind, distance_km: float, duration_min: float) -> float:
    """Return min/km for running and km/h for cycling."""
    if kind == "running":
        return compute_pace(distance_km, duration_min)
    if kind == "cycling":
        return compute_speed(distance_km, duration_min)
    raise InvalidInputError(f"Unknown workout type '{kind}'")


def describe(kind: WorkoutKind, created_at: datetime) -> str:
    return f"{kind.capitalize()} on {MONTHS[created_at.month - 1]} {created_at.day}"


def new_workout_id() -> str:
    return uuid4().hex[:WORKOUT_ID_LENGTH]


def build_workout(
    kind: str,
    coords: Coords,
    distance_km: float,
    duration_min: float,
    variant_value: float,
    *,
    created_at: datetime | None = None,
    workout_id: str | None = None,
) -> Workout:
    """Build a complete record or raise InvalidInputError.

    ``variant_value`` is the cadence (spm) for running and the elevation gain
    (m) for cycling. Nothing is constructed until every value has been checked.
    """
    if kind not in WORKOUT_KINDS:
        raise InvalidInputError(f"Unknown workout type '{kind}'")
    lat, lng = _check_coords(coords)
    distance_km = _check_positive(distance_km, "distance")
    duration_min = _check_positive(duration_min, "duration")
    when = created_at or datetime.now()
    ident = workout_id or new_workout_id()

    if kind == "running":
        cadence = _check_positive(variant_value, "cadence")
        if not float(cadence).is_integer():
            raise InvalidInputError("Cadence must be a whole number of steps per minute")
        return Running(
            id=ident,
            created_at=when,
            coords=(lat, lng),
            distance_km=distance_km,
            duration_min=duration_min,
            cadence_spm=int(cadence),
            pace_min_per_km=compute_pace(distance_km, duration_min),
            description=describe("running", when),
        )

    elevation = _check_finite(variant_value, "elevation gain")
    return Cycling(
        id=ident,
        created_at=when,
        coords=(lat, lng),
        distance_km=distance_km,
        duration_min=duration_min,
        elevation_gain_m=elevation,
        speed_km_per_h=compute_speed(distance_km, duration_min),
        description=describe("cycling", when),
    )


def _check_finite(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{field_name.capitalize()} must be a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise InvalidInputError(f"{field_name.capitalize()} is too large") from exc
    if not math.isfinite(number):
        raise InvalidInputError(f"{field_name.capitalize()} must be a finite number")
    return number


def _check_positive(value: object, field_name: str) -> float:
    number = _check_finite(value, field_name)
    if number <= 0:
        raise InvalidInputError(f"{field_name.capitalize()} must be > 0")
    return number


def _check_coords(coords: Coords) -> Coords:
    try:
        lat, lng = coords
    except (TypeError, ValueError) as exc:
        raise InvalidInputError("Coordinates must be a (latitude, longitude) pair") from exc
    return _check_finite(lat, "latitude"), _check_finite(lng, "longitude")
