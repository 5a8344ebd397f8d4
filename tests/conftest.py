import os
import tempfile

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="barta-test-"))

import pytest
from fastapi.testclient import TestClient

from barta.db.store import Database, get_db
from barta.main import app


class FakeClock:
    """Управляемые часы в миллисекундах"""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db():
    return Database.in_memory()


@pytest.fixture
def client(db, monkeypatch):
    monkeypatch.setattr("barta.main.get_database", lambda: db)
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
