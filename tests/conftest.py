# tests/conftest.py

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from task_ledger.database import create_tables, get_db
from task_ledger.events import EventBus, TaskEvent
from task_ledger.main import app
from task_ledger.store import TaskStore

OWNER = "0x" + "a" * 40
OTHER = "0x" + "b" * 40
PASSWORD = "correct horse battery staple"


class FakeClock:
    """Deterministic clock; tests move time forward explicitly."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def events(bus: EventBus) -> list[TaskEvent]:
    received: list[TaskEvent] = []
    bus.subscribe(received.append)
    return received


@pytest.fixture()
def store(db, bus: EventBus, clock: FakeClock) -> TaskStore:
    return TaskStore(db, bus=bus, clock=clock)


@pytest.fixture()
def client(engine):
    def override_get_db():
        session = Session(engine)
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def signup(client: TestClient, address: str = OWNER, password: str = PASSWORD) -> dict[str, str]:
    """Register an address and return bearer headers for it."""
    response = client.post("/api/auth/signup", json={"address": address, "password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
