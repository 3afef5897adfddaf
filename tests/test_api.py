"""
HTTP round-trip: wizard steps → plan preview → profile creation.
Drafts live in memory, profiles in a throw-away SQLite file (aiosqlite).
"""
from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from api.v1.onboarding import SessionId, get_clock, get_draft_store
from main import app
from services.db import Base, get_session
from services.draft_store import InMemoryDraftStore

TODAY = date(2026, 3, 15)
BASE = "/api/v1/onboarding/phone-1"

STEPS = [
    {"goal": "lose_weight"},
    {"current_weight": 70},
    {"height": "175"},
    {"gender": "male", "birth_date": "1996-03-15"},
    {"activity_level": "moderate"},
    {"target_weight": 65},
]
IDENTITY = {"id": "u-42", "email": "sam@example.com", "first_name": "Sam", "last_name": "Lee"}


@pytest.fixture
def client(tmp_path):
    db_file = tmp_path / "profiles.db"
    Base.metadata.create_all(create_engine(f"sqlite:///{db_file}"))
    async_engine = create_async_engine(f"sqlite+aiosqlite:///{db_file}", poolclass=NullPool)
    maker = async_sessionmaker(async_engine, expire_on_commit=False)

    async def _session():
        async with maker() as s:
            yield s

    stores: dict[str, InMemoryDraftStore] = {}

    def _store(session_id: str = SessionId):
        return stores.setdefault(session_id, InMemoryDraftStore())

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_draft_store] = _store
    app.dependency_overrides[get_clock] = lambda: (lambda: TODAY)
    with TestClient(app) as c:
        c.stores = stores
        yield c
    app.dependency_overrides.clear()


def _walk(c: TestClient, steps=STEPS):
    for step in steps:
        r = c.patch(BASE, json=step)
        assert r.status_code == 200, r.text
    return r.json()


# ── meta ─────────────────────────────────────────────────────────────
def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


# ── draft ────────────────────────────────────────────────────────────
def test_empty_draft_lists_every_step(client):
    body = client.get(BASE).json()
    assert body["missing"][0] == "goal"
    assert len(body["missing"]) == 7


def test_steps_accumulate(client):
    body = _walk(client)
    assert body["missing"] == []
    assert body["height"] == 175.0
    assert body["birth_date"] == "1996-03-15"


def test_invalid_step_returns_field_and_message(client):
    client.patch(BASE, json={"current_weight": 80})
    r = client.patch(BASE, json={"target_weight": 40})
    assert r.status_code == 422
    assert r.json()["detail"] == {
        "field": "target_weight",
        "message": "Target weight should be within 25% of your current weight (60 - 100 kg)",
    }
    assert client.get(BASE).json()["target_weight"] is None


def test_derived_or_unknown_keys_refused(client):
    assert client.patch(BASE, json={"bmr": 1500}).status_code == 422
    assert client.patch(BASE, json={"shoe_size": 44}).status_code == 422
    empty = client.patch(BASE, json={})
    assert empty.status_code == 422
    assert empty.json()["detail"] == {"field": "step", "message": "Nothing to save in this step"}


def test_oversized_number_is_a_validation_error(client):
    r = client.patch(BASE, json={"current_weight": 10**400})
    assert r.status_code == 422
    assert r.json()["detail"] == {"field": "current_weight", "message": "Please enter a valid number"}


def test_bad_session_id(client):
    assert client.get("/api/v1/onboarding/a.b").status_code == 422


def test_discard(client):
    _walk(client, STEPS[:2])
    assert client.delete(BASE).status_code == 204
    assert client.get(BASE).json()["current_weight"] is None


# ── plan ─────────────────────────────────────────────────────────────
def test_plan_preview(client):
    _walk(client)
    r = client.post(f"{BASE}/plan")
    assert r.status_code == 200
    assert r.json() == {
        "age": 30,
        "bmr": 1649,
        "tdee": 2556,
        "target_calories": 2056,
        "estimated_goal_date": "2026-05-24",
    }


def test_plan_incomplete(client):
    _walk(client, [s for s in STEPS if "activity_level" not in s])
    r = client.post(f"{BASE}/plan")
    assert r.status_code == 409
    assert r.json()["detail"]["field"] == "activity_level"


# ── complete ─────────────────────────────────────────────────────────
def test_complete_creates_profile_and_clears_draft(client):
    _walk(client)
    r = client.post(f"{BASE}/complete", json=IDENTITY)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["goal_type"] == "lose_weight"
    assert body["target_calories"] == 2056
    assert body["estimated_goal_date"] == "2026-05-24"
    assert client.stores["phone-1"].get() is None

    fetched = client.get("/api/v1/users/u-42")
    assert fetched.status_code == 200
    assert fetched.json()["bmr"] == 1649


def test_duplicate_profile_keeps_draft(client):
    _walk(client)
    assert client.post(f"{BASE}/complete", json=IDENTITY).status_code == 201

    _walk(client)
    r = client.post(f"{BASE}/complete", json=IDENTITY)
    assert r.status_code == 409
    assert r.json()["detail"] == {"field": "id", "message": "User already exists"}
    assert client.stores["phone-1"].get() is not None


def test_complete_incomplete_draft(client):
    _walk(client, STEPS[:3])
    r = client.post(f"{BASE}/complete", json=IDENTITY)
    assert r.status_code == 409
    assert r.json()["detail"]["field"] == "gender"


def test_unknown_user(client):
    assert client.get("/api/v1/users/nobody").status_code == 404


def test_error_bodies_documented(client):
    paths = client.get("/openapi.json").json()["paths"]
    step = paths["/api/v1/onboarding/{session_id}"]["patch"]["responses"]
    plan = paths["/api/v1/onboarding/{session_id}/plan"]["post"]["responses"]
    assert step["422"]["content"]["application/json"]["schema"]["$ref"].endswith("/FieldErrorResponse")
    assert plan["409"]["content"]["application/json"]["schema"]["$ref"].endswith("/FieldErrorResponse")
