"""
tests/test_auth_api.py -- The bearer-token gate, exercised through the ASGI stack.

Each rejection state of the auth dependency is driven over HTTP against a
mutating route and must leave the note table untouched:
  - no Authorization header / wrong scheme
  - undecodable token
  - token signed with another key
  - expired token ("token expired")
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from auth.tokens import ALGORITHM, issue_token

NEW_NOTE = {"content": "should never be stored"}


def _note_count(client: TestClient) -> int:
    return len(client.get("/api/notes").json())


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": ""},
        {"Authorization": "Bearer"},
        {"Authorization": "Bearer    "},
        {"Authorization": "Token abc.def.ghi"},
        {"Authorization": "Basic cm9vdDpzZWNyZXQ="},
        {"Authorization": "Bearer not-a-jwt"},
    ],
)
def test_missing_or_malformed_token_is_401(client: TestClient, headers: dict) -> None:
    before = _note_count(client)
    resp = client.post("/api/notes", json=NEW_NOTE, headers=headers)
    assert resp.status_code == 401
    assert resp.json()["error"] == "token missing or invalid"
    assert _note_count(client) == before


def test_token_signed_with_other_key_is_401(client: TestClient, seeded) -> None:
    user_store, _ = seeded
    root = user_store.get_by_username("root")
    payload = {"sub": root.id, "username": "root", "exp": datetime.now(timezone.utc) + timedelta(hours=1)}
    forged = jwt.encode(payload, "z" * 48, algorithm=ALGORITHM)
    resp = client.post("/api/notes", json=NEW_NOTE, headers={"Authorization": f"Bearer {forged}"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "token missing or invalid"


def test_expired_token_is_401_with_expired_message(client: TestClient, seeded) -> None:
    user_store, _ = seeded
    expired = issue_token(user_store.get_by_username("root"), ttl_seconds=-1)
    before = _note_count(client)
    resp = client.post("/api/notes", json=NEW_NOTE, headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "token expired"
    assert _note_count(client) == before


def test_scheme_is_case_insensitive(client: TestClient, login_as) -> None:
    token = login_as()["Authorization"].split(" ", 1)[1]
    resp = client.post("/api/notes", json={"content": "lowercase scheme"}, headers={"Authorization": f"bearer {token}"})
    assert resp.status_code == 201


def test_auth_runs_before_body_validation(client: TestClient) -> None:
    """An anonymous request with an invalid body is refused as 401, not 400."""
    resp = client.post("/api/notes", json={})
    assert resp.status_code == 401
