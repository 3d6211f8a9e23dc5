import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import create_app
from stepup_app import routes
from stepup_app.repository import WorkoutRepository
from stepup_app.storage import MemoryStore

# Wednesday; its week starts on Sunday 2024-03-10
TODAY = date(2024, 3, 13)


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setattr(routes, "_today", lambda: TODAY)
    app = create_app({
        "TESTING": True,
        "STEPUP_DATA_DIR": str(tmp_path / "data"),
        "STEPUP_LOG_FILE": str(tmp_path / "logs.jsonl"),
    })
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def repo(store):
    return WorkoutRepository(store)
