import os
import json

from .defaults import DEFAULT_DOCUMENT, STORE_KEY
from .errors import StorageReadError, StorageWriteError
from .models import StoreDocument, document_from_dict, document_to_dict

STORE_FILENAME = "store.json"


def ensure_data_files(data_dir: str) -> str:
    os.makedirs(data_dir, exist_ok=True)

    store_path = os.path.join(data_dir, STORE_FILENAME)
    if not os.path.exists(store_path):
        save_json(store_path, {STORE_KEY: json.dumps(DEFAULT_DOCUMENT)})

    return store_path


def save_json(path: str, data):
    tmp_path = path + ".tmp"
    with open(tmp_path, "w") as f:
        json.dump(data, f, indent=2)
    os.replace(tmp_path, path)


class MemoryStore:
    """Key-value store held in a dict. Used by tests."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value


class JsonFileStore:
    """
    Key-value store backed by one JSON object file mapping keys to strings.

    Writes go through a temp file and ``os.replace`` so a crash mid-write
    never leaves a truncated store behind.
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self):
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key):
        try:
            data = self._read_all()
        except (OSError, ValueError) as e:
            raise StorageReadError(str(e)) from e
        value = data.get(key)
        return value if isinstance(value, str) else None

    def set(self, key, value):
        try:
            data = self._read_all()
        except (OSError, ValueError) as e:
            # Never replace a store we could not read
            raise StorageWriteError(str(e)) from e
        data[key] = value
        try:
            save_json(self.path, data)
        except OSError as e:
            raise StorageWriteError(str(e)) from e


def read_document(store, key: str = STORE_KEY) -> StoreDocument:
    """
    Read and decode the store document.

    Raises StorageReadError when the store fails or holds corrupt JSON;
    returns an empty document when nothing has been written yet.
    """
    try:
        raw = store.get(key)
    except StorageReadError:
        raise
    except Exception as e:
        raise StorageReadError(str(e)) from e

    if raw is None:
        return StoreDocument()
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise StorageReadError(f"Corrupt document under '{key}': {e}") from e
    return document_from_dict(data)


def write_document(store, document: StoreDocument, key: str = STORE_KEY):
    payload = json.dumps(document_to_dict(document))
    try:
        store.set(key, payload)
    except StorageWriteError:
        raise
    except Exception as e:
        raise StorageWriteError(str(e)) from e
