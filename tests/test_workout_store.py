from __future__ import annotations

import json
from pathlib import Path

import pytest

from mapty.workout.codec import encode_workout
from mapty.workout.metrics import build_workout
from mapty.workout.store import (
    STORAGE_KEY,
    FileSlotStorage,
    MemorySlotStorage,
    PersistenceUnavailableError,
    WorkoutStore,
)


class QuotaExceededStorage(MemorySlotStorage):
    def set(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")


def _run(workout_id: str = "run-1"):
    return build_workout("running", (40.0, -73.0), 5, 30, 150, workout_id=workout_id)


def _ride(workout_id: str = "ride-1"):
    return build_workout("cycling", (40.1, -73.2), 20, 50, -12, workout_id=workout_id)


def test_append_then_find_by_id() -> None:
    store = WorkoutStore(MemorySlotStorage())
    workout = _run()

    store.append(workout)

    assert store.find_by_id("run-1") is workout
    assert store.find_by_id("missing") is None
    assert len(store) == 1


def test_append_rejects_duplicate_id() -> None:
    store = WorkoutStore(MemorySlotStorage())
    store.append(_run("same"))

    with pytest.raises(ValueError):
        store.append(_ride("same"))
    assert len(store) == 1


def test_persist_and_rehydrate_round_trip(tmp_path: Path) -> None:
    storage = FileSlotStorage(tmp_path)
    store = WorkoutStore(storage)
    originals = (_run(), _ride())
    for workout in originals:
        store.append(workout)
    store.persist()

    restored = WorkoutStore(storage).rehydrate()

    assert restored == originals
    payload = json.loads((tmp_path / f"{STORAGE_KEY}.json").read_text(encoding="utf-8"))
    assert [item["kind"] for item in payload] == ["running", "cycling"]


def test_persist_replaces_previous_value() -> None:
    storage = MemorySlotStorage()
    store = WorkoutStore(storage)
    store.append(_run())
    store.persist()
    store.append(_ride())
    store.persist()

    payload = json.loads(storage.slots[STORAGE_KEY])
    assert [item["id"] for item in payload] == ["run-1", "ride-1"]


def test_persist_failure_keeps_memory() -> None:
    store = WorkoutStore(QuotaExceededStorage())
    store.append(_run())

    with pytest.raises(PersistenceUnavailableError):
        store.persist()
    assert store.find_by_id("run-1") is not None


def test_reset_then_rehydrate_is_empty(tmp_path: Path) -> None:
    storage = FileSlotStorage(tmp_path)
    store = WorkoutStore(storage)
    store.append(_run())
    store.persist()

    store.reset()

    assert len(store) == 0
    assert not (tmp_path / f"{STORAGE_KEY}.json").exists()
    assert store.rehydrate() == ()


def test_rehydrate_first_run_is_empty(tmp_path: Path) -> None:
    store = WorkoutStore(FileSlotStorage(tmp_path / "missing"))
    assert store.rehydrate() == ()


def test_rehydrate_unparsable_slot_clears_memory() -> None:
    storage = MemorySlotStorage()
    storage.set(STORAGE_KEY, "{not json")
    store = WorkoutStore(storage)
    store.append(_run())

    assert store.rehydrate() == ()
    assert len(store) == 0


def test_rehydrate_skips_bad_and_duplicate_entries() -> None:
    storage = MemorySlotStorage()
    good = encode_workout(_run())
    storage.set(
        STORAGE_KEY,
        json.dumps([good, {"kind": "rowing"}, good, encode_workout(_ride())]),
    )

    restored = WorkoutStore(storage).rehydrate()

    assert [workout.id for workout in restored] == ["run-1", "ride-1"]


class UnreadableStorage(MemorySlotStorage):
    def get(self, key: str) -> str | None:
        raise OSError("permission denied")


def test_rehydrate_non_utf8_file_is_empty(tmp_path: Path) -> None:
    (tmp_path / f"{STORAGE_KEY}.json").write_bytes(b"\xff\xfe[not utf8")

    assert WorkoutStore(FileSlotStorage(tmp_path)).rehydrate() == ()


def test_rehydrate_read_error_is_empty(caplog: pytest.LogCaptureFixture) -> None:
    store = WorkoutStore(UnreadableStorage())

    assert store.rehydrate() == ()
    assert "Unable to read stored workouts" in caplog.text


def test_rehydrate_skips_oversized_number_and_keeps_backup() -> None:
    storage = MemorySlotStorage()
    good = encode_workout(_run("a"))
    raw = json.dumps([good, dict(good, id="b", distance_km=10**400)])
    storage.set(STORAGE_KEY, raw)
    store = WorkoutStore(storage)

    restored = store.rehydrate()

    assert [workout.id for workout in restored] == ["a"]
    assert store.skipped_entries == 1
    assert storage.slots[store.backup_key] == raw


def test_rehydrate_without_skips_writes_no_backup() -> None:
    storage = MemorySlotStorage()
    store = WorkoutStore(storage)
    store.append(_run())
    store.persist()

    store.rehydrate()

    assert store.skipped_entries == 0
    assert list(storage.slots) == [STORAGE_KEY]


def test_reset_failure_still_clears_memory() -> None:
    class LockedStorage(MemorySlotStorage):
        def remove(self, key: str) -> None:
            raise OSError("read-only file system")

    store = WorkoutStore(LockedStorage())
    store.append(_run())

    with pytest.raises(PersistenceUnavailableError):
        store.reset()
    assert len(store) == 0
