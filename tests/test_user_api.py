"""
tests/test_user_api.py -- Integration tests for registration and login routes.

Starts with one user in the database (root/secret, see conftest.seeded).

Coverage:
  - POST /api/users: fresh username 201, duplicate 400 with message, short
    username/password 400 listing every violation, no hash in responses
  - GET /api/users: users listed with their note ids
  - POST /api/login: success returns a token; unknown user and wrong
    password give identical 401 responses, overlong password is a plain 401
  - Passwords over 72 UTF-8 bytes are refused at registration with a 400
  - Login rate limit: 429 with Retry-After once the window is used up
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from core.config import get_settings


def _usernames(client: TestClient) -> list[str]:
    return [u["username"] for u in client.get("/api/users").json()]


class TestRegistration:
    def test_creation_succeeds_with_a_fresh_username(self, client: TestClient) -> None:
        users_at_start = _usernames(client)
        new_user = {"username": "and19", "name": "Andres Rivero", "password": "andriv"}

        resp = client.post("/api/users", json=new_user)

        assert resp.status_code == 201
        assert resp.headers["content-type"].startswith("application/json")
        body = resp.json()
        assert body["username"] == "and19"
        assert body["name"] == "Andres Rivero"
        assert body["notes"] == []
        users_at_end = _usernames(client)
        assert len(users_at_end) == len(users_at_start) + 1
        assert "and19" in users_at_end

    def test_name_is_optional(self, client: TestClient) -> None:
        resp = client.post("/api/users", json={"username": "mluukkai", "password": "salainen"})
        assert resp.status_code == 201
        assert resp.json()["name"] is None

    def test_creation_fails_if_username_already_taken(self, client: TestClient) -> None:
        users_at_start = client.get("/api/users").json()

        resp = client.post("/api/users", json={"username": "root", "name": "Superuser", "password": "rivero"})

        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("application/json")
        assert "expected `username` to be unique" in resp.json()["error"]
        assert client.get("/api/users").json() == users_at_start

    def test_short_username_and_password_report_both_violations(self, client: TestClient) -> None:
        resp = client.post("/api/users", json={"username": "ab", "password": "pw"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "validation_error"
        assert len(body["details"]) == 2
        assert any(d.startswith("username") for d in body["details"])
        assert any(d.startswith("password") for d in body["details"])
        assert "ab" not in _usernames(client)

    def test_missing_password_is_rejected(self, client: TestClient) -> None:
        resp = client.post("/api/users", json={"username": "and19"})
        assert resp.status_code == 400
        assert "and19" not in _usernames(client)

    def test_password_over_72_bytes_is_rejected_before_hashing(self, client: TestClient) -> None:
        # 40 characters but 80 bytes in UTF-8: bcrypt cannot take it.
        resp = client.post("/api/users", json={"username": "anna", "password": "é" * 40})
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "validation_error"
        assert any(d.startswith("password") and "72 bytes" in d for d in body["details"])
        assert "anna" not in _usernames(client)

    def test_multibyte_password_within_72_bytes_is_accepted(self, client: TestClient) -> None:
        password = "é" * 36
        assert client.post("/api/users", json={"username": "anna", "password": password}).status_code == 201
        assert client.post("/api/login", json={"username": "anna", "password": password}).status_code == 200

    def test_password_hash_is_never_returned(self, client: TestClient) -> None:
        created = client.post("/api/users", json={"username": "and19", "password": "andriv"}).json()
        listed = client.get("/api/users").json()
        for record in [created, *listed]:
            assert "password" not in record
            assert "hashed_password" not in record
            assert "passwordHash" not in record

    def test_users_list_includes_owned_note_ids(self, client: TestClient) -> None:
        notes = client.get("/api/notes").json()
        root = next(u for u in client.get("/api/users").json() if u["username"] == "root")
        assert sorted(root["notes"]) == sorted(n["id"] for n in notes)


class TestLogin:
    def test_login_succeeds_and_returns_token(self, client: TestClient) -> None:
        resp = client.post("/api/login", json={"username": "root", "password": "secret"})
        assert resp.status_code == 200
        body = resp.json()
        assert "token" in body
        assert body["username"] == "root"
        assert body["name"] == "Superuser"
        assert resp.headers["cache-control"] == "no-store"

    def test_register_then_login(self, client: TestClient) -> None:
        client.post("/api/users", json={"username": "and19", "name": "Andres Rivero", "password": "andriv"})
        resp = client.post("/api/login", json={"username": "and19", "password": "andriv"})
        assert resp.status_code == 200
        assert resp.json()["token"]

    def test_wrong_password_and_unknown_user_are_indistinguishable(self, client: TestClient) -> None:
        wrong = client.post("/api/login", json={"username": "root", "password": "nope"})
        unknown = client.post("/api/login", json={"username": "ghost", "password": "nope"})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()
        assert wrong.json()["error"] == "invalid username or password"

    def test_overlong_password_is_just_a_wrong_password(self, client: TestClient) -> None:
        resp = client.post("/api/login", json={"username": "root", "password": "x" * 100})
        assert resp.status_code == 401
        assert resp.json()["error"] == "invalid username or password"


class TestLoginRateLimit:
    @pytest.fixture
    def limited(self, monkeypatch):
        """Switch the limiter on with a two-per-hour login limit."""
        monkeypatch.setattr(limiter, "enabled", True)
        monkeypatch.setattr(get_settings(), "login_rate_limit", "2/hour")
        limiter.reset()
        yield
        limiter.reset()

    def test_third_login_within_the_window_gets_429(self, client: TestClient, limited) -> None:
        credentials = {"username": "root", "password": "secret"}
        statuses = [client.post("/api/login", json=credentials).status_code for _ in range(3)]
        assert statuses == [200, 200, 429]

    def test_429_carries_retry_after_for_the_limit_window(self, client: TestClient, limited) -> None:
        for _ in range(2):
            client.post("/api/login", json={"username": "root", "password": "nope"})
        resp = client.post("/api/login", json={"username": "root", "password": "secret"})
        assert resp.status_code == 429
        assert resp.headers["retry-after"] == "3600"
        assert resp.json()["error"] == "too many requests"
        assert resp.json()["code"] == "rate_limited"

    def test_other_routes_are_not_limited(self, client: TestClient, limited) -> None:
        for _ in range(5):
            assert client.get("/api/users").status_code == 200
