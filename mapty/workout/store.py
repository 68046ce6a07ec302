"""Session workout collection and its persisted key-value slot."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator, Protocol

from mapty.workout.codec import WorkoutDecodeError, decode_workout, encode_workout
from mapty.workout.model import Workout

logger = logging.getLogger(__name__)

STORAGE_KEY = "workouts"


def _default_storage_dir() -> Path:
    return Path.home() / ".mapty"


class PersistenceUnavailableError(RuntimeError):
    """Raised when the workout slot cannot be written."""


class SlotStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class FileSlotStorage:
    """One JSON file per key under ``base_dir``."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir = base_dir or _default_storage_dir()

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        target = self._path(key)
        if not target.exists():
            return None
        return target.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class MemorySlotStorage:
    def __init__(self) -> None:
        self.slots: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.slots[key] = value

    def remove(self, key: str) -> None:
        self.slots.pop(key, None)


class WorkoutStore:
    """Ordered workouts for the session, mirrored wholesale into one slot.

    Insertion order is creation order. ``append`` only touches memory;
    callers follow it with ``persist``.
    """

    def __init__(self, storage: SlotStorage, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._workouts: list[Workout] = []
        self.skipped_entries = 0

    def __len__(self) -> int:
        return len(self._workouts)

    def __iter__(self) -> Iterator[Workout]:
        return iter(tuple(self._workouts))

    @property
    def workouts(self) -> tuple[Workout, ...]:
        return tuple(self._workouts)

    def append(self, workout: Workout) -> None:
        if self.find_by_id(workout.id) is not None:
            raise ValueError(f"Workout id already stored: {workout.id}")
        self._workouts.append(workout)

    def find_by_id(self, workout_id: str) -> Workout | None:
        for workout in self._workouts:
            if workout.id == workout_id:
                return workout
        return None

    def persist(self) -> None:
        payload = json.dumps(
            [encode_workout(workout) for workout in self._workouts],
            ensure_ascii=True,
        )
        try:
            self._storage.set(self._key, payload)
        except OSError as exc:
            raise PersistenceUnavailableError(
                f"Unable to save {len(self._workouts)} workouts"
            ) from exc
        logger.debug("Persisted %d workouts under '%s'", len(self._workouts), self._key)

    @property
    def backup_key(self) -> str:
        return f"{self._key}.bak"

    def rehydrate(self) -> tuple[Workout, ...]:
        """Reload the slot, skipping entries that cannot be decoded.

        When entries are skipped the raw slot is copied under ``backup_key``
        first, since the next ``persist`` rewrites the slot without them.
        """
        self._workouts = []
        self.skipped_entries = 0
        try:
            raw = self._storage.get(self._key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Unable to read stored workouts, starting empty: %s", exc)
            return ()
        if raw is None:
            return ()

        try:
            items = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Stored workouts are not valid JSON, starting empty: %s", exc)
            return ()
        if not isinstance(items, list):
            logger.warning("Stored workouts must be a JSON array, starting empty")
            return ()

        for index, item in enumerate(items):
            try:
                workout = decode_workout(item)
            except WorkoutDecodeError as exc:
                logger.warning("Skipping stored workout %d: %s", index + 1, exc)
                self.skipped_entries += 1
                continue
            if self.find_by_id(workout.id) is not None:
                logger.warning("Skipping stored workout %d: duplicate id %s", index + 1, workout.id)
                self.skipped_entries += 1
                continue
            self._workouts.append(workout)
        if self.skipped_entries:
            self._backup(raw)
        logger.debug("Rehydrated %d workouts", len(self._workouts))
        return tuple(self._workouts)

    def reset(self) -> None:
        self._workouts = []
        try:
            self._storage.remove(self._key)
        except OSError as exc:
            raise PersistenceUnavailableError("Unable to clear stored workouts") from exc

    def _backup(self, raw: str) -> None:
        try:
            self._storage.set(self.backup_key, raw)
        except OSError as exc:
            logger.warning("Unable to back up stored workouts: %s", exc)
            return
        logger.warning(
            "%d stored workouts were skipped; original data kept under '%s'",
            self.skipped_entries,
            self.backup_key,
        )
