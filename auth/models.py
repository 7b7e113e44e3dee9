"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and routes do
the work.

Layer rule: no imports from api/ or notes/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    username is immutable after creation and unique (case-sensitive). The
    hashed_password is a self-describing bcrypt digest and must never leave
    the server -- api/ response models do not carry it.

    id is None before the record is written to the database.
    """

    username: str
    hashed_password: str
    name: str | None = None
    id: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity extracted from a verified token.

    Built from token claims alone -- no store lookup. Attached to
    request.state.user by the auth dependency.
    """

    user_id: str
    username: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User
