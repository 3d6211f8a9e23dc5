import json
from datetime import date

import pytest

from stepup_app.defaults import STORE_KEY
from stepup_app.errors import StorageReadError, StorageWriteError
from stepup_app.models import ActiveWorkout, StoreDocument
from stepup_app.storage import (
    JsonFileStore,
    MemoryStore,
    ensure_data_files,
    read_document,
    write_document,
)

pytestmark = pytest.mark.unit


class BrokenStore:
    def get(self, key):
        raise RuntimeError("disk on fire")

    def set(self, key, value):
        raise RuntimeError("disk on fire")


def test_ensure_data_files_creates_empty_document(tmp_path):
    path = ensure_data_files(str(tmp_path / "data"))
    stored = json.loads(json.loads(open(path).read())[STORE_KEY])
    assert stored == {"workouts": [], "customTypes": []}


def test_ensure_data_files_leaves_existing_store(tmp_path):
    store = JsonFileStore(ensure_data_files(str(tmp_path)))
    store.set(STORE_KEY, '{"workouts": [], "customTypes": ["Climbing"]}')
    ensure_data_files(str(tmp_path))
    assert read_document(store).custom_types == ("Climbing",)


def test_json_file_store_get_set(tmp_path):
    store = JsonFileStore(str(tmp_path / "store.json"))
    assert store.get("missing") is None
    store.set("a", "1")
    store.set("b", "2")
    assert store.get("a") == "1"
    assert store.get("b") == "2"
    assert not (tmp_path / "store.json.tmp").exists()


def test_json_file_store_corrupt_file_raises_read_error(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json")
    with pytest.raises(StorageReadError):
        JsonFileStore(str(path)).get(STORE_KEY)


def test_json_file_store_does_not_overwrite_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json")
    with pytest.raises(StorageWriteError):
        JsonFileStore(str(path)).set(STORE_KEY, "{}")
    assert path.read_text() == "{not json"


def test_read_document_empty_store():
    assert read_document(MemoryStore()) == StoreDocument()


def test_read_document_corrupt_json():
    with pytest.raises(StorageReadError):
        read_document(MemoryStore({STORE_KEY: "[[["}))


def test_adapter_failures_are_wrapped():
    with pytest.raises(StorageReadError):
        read_document(BrokenStore())
    with pytest.raises(StorageWriteError):
        write_document(BrokenStore(), StoreDocument())


def test_write_then_read():
    store = MemoryStore()
    doc = StoreDocument(
        workouts=(ActiveWorkout(date=date(2024, 3, 1), type="Cardio", duration=30, id="x"),),
        custom_types=("Climbing",),
    )
    write_document(store, doc)
    assert read_document(store) == doc
