"""Display helpers shared by the web and terminal front-ends."""

from __future__ import annotations

from mapty.workout.model import Running, Workout, WorkoutKind

_KIND_ICONS: dict[str, str] = {
    "running": "🏃",
    "cycling": "🚴",
}


def fmt_number(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}"


def kind_icon(kind: WorkoutKind) -> str:
    return _KIND_ICONS[kind]


def popup_class(kind: WorkoutKind) -> str:
    return f"{kind}-popup"


def workout_details(workout: Workout) -> list[tuple[str, str, str]]:
    """Return ``(icon, value, unit)`` rows for a list entry."""
    rows = [
        (kind_icon(workout.kind), fmt_number(workout.distance_km), "km"),
        ("⏱", fmt_number(workout.duration_min), "min"),
    ]
    if isinstance(workout, Running):
        rows.append(("⚡️", fmt_number(workout.pace_min_per_km), "min/km"))
        rows.append(("🦶", str(workout.cadence_spm), "spm"))
    else:
        rows.append(("⚡️", fmt_number(workout.speed_km_per_h), "km/h"))
        rows.append(("⛰", fmt_number(workout.elevation_gain_m, 0), "m"))
    return rows


def workout_summary(workout: Workout) -> str:
    details = " | ".join(f"{value} {unit}" for _, value, unit in workout_details(workout))
    return f"{workout.description} [{workout.id}] {details}"
