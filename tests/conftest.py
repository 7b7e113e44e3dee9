"""
tests/conftest.py -- Shared test fixtures for notekeeper.

This module provides:
  - stores: fresh (UserStore, NoteStore) on an isolated in-memory DB
  - client: TestClient over the real app, seeded with user root/secret and
    two notes owned by root
  - helpers to log in and build Authorization headers

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. A uuid in the name keeps every test's database separate.

Environment must be set before any app import: DEBUG lets get_settings()
auto-generate SECRET_KEY, BCRYPT_ROUNDS=4 keeps hashing fast, the rate
limiter is switched off, and TestClient's "testserver" host is allowed.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.passwords import hash_password
from auth.store import UserStore
from core.database import create_db_engine
from notes.models import Note
from notes.store import NoteStore

INITIAL_NOTES = [
    {"content": "HTML is easy", "important": False},
    {"content": "Browser can execute only JavaScript", "important": True},
]


def _memory_url() -> str:
    return f"sqlite:///file:test_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


def _patch_lifespan(engine, user_store: UserStore, note_store: NoteStore):
    """Return a lifespan that wires the test stores into app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.engine = engine
        app.state.user_store = user_store
        app.state.note_store = note_store
        yield

    return test_lifespan


@pytest.fixture
def stores() -> Generator[tuple[UserStore, NoteStore], None, None]:
    engine = create_db_engine(_memory_url())
    yield UserStore(engine), NoteStore(engine)
    engine.dispose()


@pytest.fixture
def seeded(stores):
    """Stores pre-loaded with user root/secret owning INITIAL_NOTES."""
    user_store, note_store = stores
    root = user_store.create_user("root", "Superuser", hash_password("secret"))
    for data in INITIAL_NOTES:
        note_store.create_note(Note(user_id=root.id, **data))
    return user_store, note_store


@pytest.fixture
def client(seeded) -> Generator[TestClient, None, None]:
    """TestClient over the real app with the seeded stores injected."""
    user_store, note_store = seeded
    app.router.lifespan_context = _patch_lifespan(user_store.engine, user_store, note_store)
    with TestClient(app, raise_server_exceptions=True) as test_client:
        yield test_client


@pytest.fixture
def login_as(client: TestClient):
    """Return a function that logs in and yields ready-to-use request headers."""

    def _login(username: str = "root", password: str = "secret") -> dict[str, str]:
        resp = client.post("/api/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login
