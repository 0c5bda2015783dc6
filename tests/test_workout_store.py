import os
import sys
import json
import logging
import sqlite3
import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import TotalsCalculator
from db import KeyValueRepository
from storage_service import StorageService
from workout_models import Exercise, ExerciseSet, Totals, WorkoutNotFoundError, WorkoutType
from workout_service import WorkoutStore, generate_set_id
from workout_type_service import WorkoutTypeRegistry


class FailingRepository(KeyValueRepository):
    def set(self, key: str, value: str) -> None:
        raise sqlite3.OperationalError("disk I/O error")


@pytest.fixture
def repo(tmp_path):
    return KeyValueRepository(str(tmp_path / "workout.db"))


@pytest.fixture
def storage(repo):
    return StorageService(repo)


@pytest.fixture
def store(storage):
    return WorkoutStore(storage, selected_date="2024-01-10")


def bench(ex_id: str = "bench") -> Exercise:
    return Exercise(
        id=ex_id,
        name="Bench Press",
        sets=[ExerciseSet(weight=50, reps=10), ExerciseSet(weight=60, reps=8), ExerciseSet(weight=70, reps=6)],
    )


def test_generate_set_id_avoids_taken():
    first = generate_set_id()
    assert first
    assert generate_set_id({first}) != first


def test_add_exercise_assigns_unique_set_ids(store):
    original = bench()
    stored = store.add_exercise("chest", original)
    ids = [s.id for s in stored.sets]
    assert all(ids)
    assert len(set(ids)) == len(ids)
    assert all(s.id == "" for s in original.sets)
    assert store.get_exercises("chest")[0].sets[0].id == ids[0]


def test_add_exercise_keeps_existing_set_ids(store):
    ex = bench()
    ex.sets[0].id = "keep"
    stored = store.add_exercise("chest", ex)
    assert stored.sets[0].id == "keep"
    assert "keep" not in [s.id for s in stored.sets[1:]]


def test_add_exercise_persists(storage, store):
    store.add_exercise("chest", bench())
    reloaded = WorkoutStore(storage, selected_date="2024-01-10")
    reloaded.load()
    assert [ex.name for ex in reloaded.get_exercises("chest")] == ["Bench Press"]
    raw = json.loads(storage.repo.get("@pumpgym:workouts:anonymous"))
    assert "2024-01-10" in raw


def test_duplicate_exercise_id_is_ignored(store):
    assert store.add_exercise("chest", bench()) is not None
    assert store.add_exercise("chest", bench()) is None
    assert len(store.get_exercises("chest")) == 1


def test_missing_keys_are_no_ops(store):
    assert store.remove_exercise("chest", "nope") is False
    assert store.update_exercise("chest", bench()) is False
    assert store.remove_workout("chest") is False
    assert store.get_exercises("legs", "1999-01-01") == []
    assert store.get_workouts_for_date("1999-01-01") == {}


def test_remove_and_update_exercise(store):
    store.add_exercise("chest", bench("a"))
    store.add_exercise("chest", bench("b"))
    changed = bench("a").model_copy(update={"notes": "felt heavy"})
    assert store.update_exercise("chest", changed) is True
    assert store.get_exercises("chest")[0].notes == "felt heavy"
    assert store.remove_exercise("chest", "b") is True
    assert [ex.id for ex in store.get_exercises("chest")] == ["a"]


def test_set_selected_date_is_pure_cursor(store):
    store.add_exercise("chest", bench())
    store.set_selected_date("2024-01-11")
    assert store.selected_date == "2024-01-11"
    assert store.get_exercises("chest") == []
    assert store.get_exercises("chest", "2024-01-10") != []


def test_set_workout_types_for_date_never_removes(store):
    store.add_exercise("legs", bench())
    store.set_workout_types_for_date(
        "2024-01-10",
        [
            WorkoutType(id="chest", name="Chest", selected=True),
            WorkoutType(id="legs", name="Legs", selected=False),
            WorkoutType(id="back", name="Back", selected=False),
        ],
    )
    buckets = store.get_workouts_for_date("2024-01-10")
    assert buckets["chest"] == []
    assert len(buckets["legs"]) == 1
    assert "back" not in buckets


def test_remove_workout_leaves_type_selectable(storage, store):
    registry = WorkoutTypeRegistry(store, storage)
    registry.add_type("Chest", "weight-lifter", "#FF5252", type_id="chest")
    store.add_exercise("chest", bench())

    assert store.remove_workout("chest") is True
    totals = TotalsCalculator.compute_totals(store.get_exercises("chest", "2024-01-10"))
    assert totals == Totals()
    assert "2024-01-10" not in store.workouts

    store.set_selected_date("2024-01-11")
    assert registry.set_selected("chest") is True
    assert store.has_bucket("chest", "2024-01-11")


def test_copy_workout_from_date(store):
    done = bench()
    for s in done.sets:
        s.completed = True
    store.add_exercise("chest", done)
    store.set_selected_date("2024-01-17")
    store.add_exercise("chest", bench("old"))

    copies = store.copy_workout_from_date("2024-01-10", "chest", "chest")

    assert [ex.id for ex in store.get_exercises("chest")] == [copies[0].id]
    assert copies[0].id.startswith("bench-")
    source_ids = {s.id for s in store.get_exercises("chest", "2024-01-10")[0].sets}
    assert not source_ids & {s.id for s in copies[0].sets}
    assert all(not s.completed for s in copies[0].sets)
    assert [s.weight for s in copies[0].sets] == [50, 60, 70]


def test_copy_missing_workout_raises(store):
    with pytest.raises(WorkoutNotFoundError):
        store.copy_workout_from_date("2023-01-01", "chest", "chest")


def test_malformed_json_loads_empty(repo, storage, caplog):
    repo.set(storage.key("workouts"), "{not json")
    store = WorkoutStore(storage)
    with caplog.at_level(logging.WARNING):
        store.load()
    assert store.workouts == {}
    assert any(getattr(r, "event", None) == "malformed_blob" for r in caplog.records)


def test_malformed_shape_loads_empty(repo, storage, caplog):
    repo.set(storage.key("workouts"), json.dumps({"2024-01-10": {"chest": "oops"}}))
    store = WorkoutStore(storage)
    with caplog.at_level(logging.WARNING):
        store.load()
    assert store.workouts == {}
    assert any(getattr(r, "event", None) == "malformed_blob" for r in caplog.records)


def test_persistence_failure_keeps_memory_state(tmp_path, caplog):
    results = []
    storage = StorageService(FailingRepository(str(tmp_path / "fail.db")))
    store = WorkoutStore(storage, selected_date="2024-01-10", on_saved=results.append)
    with caplog.at_level(logging.WARNING):
        stored = store.add_exercise("chest", bench())
    assert stored is not None
    assert len(store.get_exercises("chest")) == 1
    assert results == [False]
    events = [getattr(r, "event", None) for r in caplog.records]
    assert "persistence_failure" in events


def test_without_storage(tmp_path):
    store = WorkoutStore(selected_date="2024-01-10")
    store.load()
    assert store.add_exercise("chest", bench()) is not None
    assert store.dates() == ["2024-01-10"]
