"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Literal


WorkoutKind = Literal["running", "cycling"]
Coords = tuple[float, float]

WORKOUT_KINDS: tuple[WorkoutKind, ...] = ("running", "cycling")


@dataclass(frozen=True)
class Running:
    id: str
    created_at: datetime
    coords: Coords
    distance_km: float
    duration_min: float
    cadence_spm: int
    pace_min_per_km: float
    description: str

    kind: ClassVar[WorkoutKind] = "running"


@dataclass(frozen=True)
class Cycling:
    id: str
    created_at: datetime
    coords: Coords
    distance_km: float
    duration_min: float
    elevation_gain_m: float
    speed_km_per_h: float
    description: str

    kind: ClassVar[WorkoutKind] = "cycling"


Workout = Running | Cycling
