# tests/conftest.py

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import build_engine
from main import create_app
from store import TaskStore

ALLOWED_ORIGIN = "http://localhost:3000"


class FakeClock:
    """Deterministic clock: each call advances by one second."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'tasks.db'}",
        cors_origins=[ALLOWED_ORIGIN],
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(settings: Settings, clock: FakeClock):
    task_store = TaskStore(build_engine(settings), clock=clock)
    task_store.create_schema()
    yield task_store
    task_store.close()


@pytest.fixture()
def client(settings: Settings):
    """Client for a freshly started app (table created and seeded)."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client
