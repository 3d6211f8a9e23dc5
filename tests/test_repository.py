import json
from dataclasses import replace
from datetime import date

import pytest

from stepup_app import repository
from stepup_app.defaults import STORE_KEY
from stepup_app.errors import (
    DuplicateTypeError,
    NotFoundError,
    StorageReadError,
    StorageWriteError,
    ValidationError,
)
from stepup_app.models import ActiveWorkout, RestDay, StoreDocument
from stepup_app.repository import WorkoutRepository
from stepup_app.storage import MemoryStore

pytestmark = pytest.mark.unit


def _cardio(day=date(2024, 3, 13), duration=30, **kwargs):
    return ActiveWorkout(date=day, type="Cardio", duration=duration, **kwargs)


class CountingStore(MemoryStore):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = 0

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)


class ReadOnlyStore(MemoryStore):
    def set(self, key, value):
        raise OSError("read-only file system")


def test_save_then_list(repo):
    saved = repo.save_workout(_cardio(notes="intervals"))
    listed = repo.list_workouts()
    assert listed == [saved]
    assert saved.id
    assert replace(saved, id=None) == _cardio(notes="intervals")


def test_update_then_list(repo):
    saved = repo.save_workout(_cardio())
    repo.update_workout(replace(saved, duration=50))
    assert [w.duration for w in repo.list_workouts()] == [50]


def test_update_can_turn_workout_into_rest_day(repo):
    saved = repo.save_workout(_cardio())
    repo.update_workout(RestDay(date=saved.date, id=saved.id))
    (only,) = repo.list_workouts()
    assert only.is_rest_day and only.duration == 0


def test_delete_then_list(repo):
    a = repo.save_workout(_cardio())
    b = repo.save_workout(_cardio(duration=10))
    repo.delete_workout(a.id)
    assert [w.id for w in repo.list_workouts()] == [b.id]


def test_ids_are_unique(repo):
    ids = [repo.save_workout(_cardio()).id for _ in range(25)]
    assert len(set(ids)) == 25


def test_add_workout_retries_taken_ids():
    ids = iter(["dup", "dup", "fresh"])
    doc, first = repository.add_workout(StoreDocument(), _cardio(), lambda: next(ids))
    doc, second = repository.add_workout(doc, _cardio(), lambda: next(ids))
    assert (first.id, second.id) == ("dup", "fresh")


def test_pure_operations_leave_input_untouched():
    doc = StoreDocument()
    new_doc, _ = repository.add_workout(doc, _cardio())
    assert doc.workouts == ()
    assert new_doc.revision == 1
    assert repository.remove_workout(new_doc, "nope") is new_doc


def test_update_missing_id_raises_without_writing():
    store = CountingStore()
    repo = WorkoutRepository(store)
    repo.save_workout(_cardio())
    with pytest.raises(NotFoundError):
        repo.update_workout(_cardio(id="ghost"))
    assert store.writes == 1


def test_delete_missing_id_is_noop():
    store = CountingStore()
    repo = WorkoutRepository(store)
    repo.save_workout(_cardio())
    repo.delete_workout("ghost")
    assert store.writes == 1
    assert len(repo.list_workouts()) == 1


def test_custom_types(repo):
    repo.add_custom_type("  Climbing ")
    repo.add_custom_type("climbing")
    assert repo.list_custom_types() == ["Climbing", "climbing"]


@pytest.mark.parametrize("name", ["Cardio", "Rest", "Climbing"])
def test_duplicate_custom_type(repo, name):
    repo.add_custom_type("Climbing")
    with pytest.raises(DuplicateTypeError):
        repo.add_custom_type(name)
    assert repo.list_custom_types() == ["Climbing"]


def test_empty_custom_type(repo):
    with pytest.raises(ValidationError):
        repo.add_custom_type("   ")


def test_list_custom_types_hides_defaults():
    raw = json.dumps({"workouts": [], "customTypes": ["Yoga", "Climbing", "Climbing"]})
    repo = WorkoutRepository(MemoryStore({STORE_KEY: raw}))
    assert repo.list_custom_types() == ["Climbing"]


def test_corrupt_document_lists_as_empty_but_blocks_writes(app):
    store = CountingStore({STORE_KEY: '{"workouts": [{"id": "a", "date": "2024-03-01"'})
    repo = WorkoutRepository(store)
    with app.app_context():
        assert repo.list_workouts() == []
        assert repo.list_custom_types() == []
        with pytest.raises(StorageReadError):
            repo.save_workout(_cardio())
        with pytest.raises(StorageReadError):
            repo.add_custom_type("Climbing")
        with pytest.raises(StorageReadError):
            repo.save_rest_day("2024-03-12")
    assert store.writes == 0
    assert store.get(STORE_KEY) == '{"workouts": [{"id": "a", "date": "2024-03-01"'


def _stored_ids(store):
    return [r["id"] for r in json.loads(store.get(STORE_KEY))["workouts"]]


@pytest.fixture()
def legacy_store():
    return MemoryStore({STORE_KEY: json.dumps({"workouts": [
        {"id": "uuid-1", "date": "2024-03-01", "type": "Cardio", "duration": None,
         "calories": 0, "intensity": "Moderate", "notes": "", "isRestDay": False},
        {"id": "uuid-2", "date": "03/02/2024", "type": "Yoga", "duration": 30},
    ], "customTypes": []})})


def test_saving_keeps_records_that_do_not_parse(legacy_store):
    repo = WorkoutRepository(legacy_store)
    saved = repo.save_workout(ActiveWorkout(date=date(2024, 3, 13), type="Yoga", duration=20))

    assert _stored_ids(legacy_store) == ["uuid-1", saved.id, "uuid-2"]
    stored = json.loads(legacy_store.get(STORE_KEY))["workouts"]
    assert stored[2] == {"id": "uuid-2", "date": "03/02/2024", "type": "Yoga", "duration": 30}
    assert [(w.id, w.duration) for w in repo.list_workouts()] == [("uuid-1", 0), (saved.id, 20)]


def test_unreadable_record_can_be_repaired_or_deleted(legacy_store):
    repo = WorkoutRepository(legacy_store)
    repo.update_workout(ActiveWorkout(date=date(2024, 3, 2), type="Yoga", duration=30, id="uuid-2"))
    assert [w.id for w in repo.list_workouts()] == ["uuid-1", "uuid-2"]

    repo.delete_workout("uuid-2")
    assert _stored_ids(legacy_store) == ["uuid-1"]


def test_new_ids_avoid_unreadable_records(legacy_store):
    ids = iter(["uuid-2", "uuid-3"])
    repo = WorkoutRepository(legacy_store, id_factory=lambda: next(ids))
    assert repo.save_workout(_cardio()).id == "uuid-3"


def test_write_failure_surfaces():
    repo = WorkoutRepository(ReadOnlyStore())
    with pytest.raises(StorageWriteError):
        repo.save_workout(_cardio())
    assert repo.list_workouts() == []


def test_save_rest_day_once_per_date(repo):
    first = repo.save_rest_day("2024-03-12")
    again = repo.save_rest_day(date(2024, 3, 12))
    assert first == again
    assert first.is_rest_day
    assert len(repo.list_workouts()) == 1


def test_save_rest_day_alongside_workout(repo):
    repo.save_workout(_cardio(day=date(2024, 3, 12)))
    repo.save_rest_day("2024-03-12")
    assert sorted(w.type for w in repo.list_workouts()) == ["Cardio", "Rest"]
