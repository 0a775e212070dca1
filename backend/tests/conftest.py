"""Pytest fixtures: per-test SQLite database, fixed clock, API helpers."""
from datetime import datetime

import pytest
import pytz
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.clock import get_clock
from app.database import Base, get_db
from app.main import app

# Import all models so they register with Base.metadata
from app.models.trip import Trip, TripMember      # noqa: F401
from app.models.itinerary import Day, Block       # noqa: F401
from app.models.activity import Activity          # noqa: F401
from app.models.proposal import BlockProposal     # noqa: F401
from app.models.vote import Vote                  # noqa: F401
from app.models.commit import Commit              # noqa: F401

FIXED_NOW = datetime(2026, 6, 1, 12, 0, tzinfo=pytz.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session for direct service calls and assertions."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database and clock dependencies overridden."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: build trips through the API, return plain dicts of ids
# ---------------------------------------------------------------------------
def create_test_trip(client: TestClient, name: str = "Lisbon", policy: str = "soft_block") -> dict:
    """Helper: POST /api/trips and return response JSON (creator is organizer)."""
    resp = client.post("/api/trips/", json={
        "name": name,
        "organizer_name": "Olivia",
        "timezone": "Europe/Lisbon",
        "currency": "EUR",
        "duplicate_policy": policy,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_test_member(client: TestClient, trip_id: str, name: str, role: str = "collaborator") -> dict:
    resp = client.post(f"/api/trips/{trip_id}/members", json={"display_name": name, "role": role})
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_test_block(client: TestClient, trip_id: str, day_id: str, label: str, **window) -> dict:
    payload = {"label": label}
    payload.update({k: v.isoformat() for k, v in window.items()})
    resp = client.post(f"/api/trips/{trip_id}/days/{day_id}/blocks", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_test_activity(client: TestClient, trip_id: str, title: str) -> dict:
    resp = client.post(f"/api/trips/{trip_id}/activities", json={
        "title": title,
        "category": "sightseeing",
        "cost_amount": "12.50",
        "cost_currency": "EUR",
        "duration_min": 90,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def build_trip(
    client: TestClient,
    policy: str = "soft_block",
    blocks: tuple = ("Morning", "Afternoon", "Evening"),
    activities: tuple = ("Tram 28", "Belem Tower", "Fado Night"),
    collaborators: tuple = ("Ana", "Bruno", "Carla"),
) -> dict:
    """Helper: a trip with one day, some blocks, activities and members.

    Returns a dict with ``trip_id``, ``organizer`` (member id), ``members``
    (collaborator ids), ``blocks`` and ``activities`` (ids keyed by name).
    """
    trip = create_test_trip(client, policy=policy)
    trip_id = trip["id"]
    organizer = next(m["id"] for m in trip["members"] if m["role"] == "organizer")
    members = [add_test_member(client, trip_id, name)["id"] for name in collaborators]

    day = client.post(f"/api/trips/{trip_id}/days", json={"date": "2026-06-02"})
    assert day.status_code == 201, day.text
    day_id = day.json()["id"]

    return {
        "trip_id": trip_id,
        "day_id": day_id,
        "organizer": organizer,
        "members": members,
        "blocks": {label: add_test_block(client, trip_id, day_id, label)["id"] for label in blocks},
        "activities": {title: add_test_activity(client, trip_id, title)["id"] for title in activities},
    }


def propose(client: TestClient, trip: dict, block_id: str, activity_id: str, member_id: str = None):
    resp = client.post(f"/api/trips/{trip['trip_id']}/blocks/{block_id}/proposals", json={
        "activity_id": activity_id,
        "member_id": member_id or trip["organizer"],
    })
    return resp


def vote(client: TestClient, trip: dict, block_id: str, activity_id: str, member_id: str):
    return client.post(f"/api/trips/{trip['trip_id']}/blocks/{block_id}/votes", json={
        "activity_id": activity_id,
        "member_id": member_id,
    })


def commit(client: TestClient, trip: dict, block_id: str, member_id: str = None, **extra):
    body = {"member_id": member_id or trip["organizer"]}
    body.update(extra)
    return client.post(f"/api/trips/{trip['trip_id']}/blocks/{block_id}/commit", json=body)


def commit_with_votes(client: TestClient, trip: dict, block: str, activity: str) -> dict:
    """Helper: propose, vote once and commit ``activity`` into ``block``."""
    block_id = trip["blocks"][block]
    activity_id = trip["activities"][activity]
    propose(client, trip, block_id, activity_id)
    assert vote(client, trip, block_id, activity_id, trip["members"][0]).status_code in (200, 201)
    resp = commit(client, trip, block_id)
    assert resp.status_code == 200, resp.text
    assert resp.json()["success"] is True, resp.json()
    return resp.json()
