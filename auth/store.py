"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper. UserStore is the repository; _row_to_user
is the mapper. Route and dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  Username uniqueness is enforced by the UNIQUE constraint on users.username,
  not by a check-then-insert in Python. Two concurrent registrations of the
  same name race on the INSERT; the loser gets IntegrityError, which
  create_user() turns into DuplicateUsername.

The engine is injected (see core/database.py) and owned by the caller, which
disposes it on shutdown.

Layer rule: no imports from api/ or notes/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, String, Table, Text, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import User
from core.database import metadata, new_object_id
from core.errors import DuplicateUsername

logger = logging.getLogger("notekeeper.auth")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

users_table = Table(
    "users",
    metadata,
    Column("id", String(24), primary_key=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("name", String(255)),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore(create_db_engine(url))
        user = store.create_user("root", "Superuser", hash_password("secret"))
        store.get_by_username("root")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine)

    def create_user(self, username: str, name: str | None, hashed_password: str) -> User:
        """Insert a new user and return it with id and created_at filled in.

        Raises DuplicateUsername if the username is already taken. Nothing is
        written in that case.
        """
        user = User(
            id=new_object_id(),
            username=username,
            name=name,
            hashed_password=hashed_password,
            created_at=_now_iso(),
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    users_table.insert().values(
                        id=user.id,
                        username=user.username,
                        name=user.name,
                        hashed_password=user.hashed_password,
                        created_at=user.created_at,
                    )
                )
        except IntegrityError as exc:
            logger.warning("Registration rejected: username=%r already exists", username)
            raise DuplicateUsername() from exc
        return user

    def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(users_table.select().where(users_table.c.username == username)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: str) -> User | None:
        with self.engine.connect() as conn:
            row = conn.execute(users_table.select().where(users_table.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def exists(self, username: str) -> bool:
        with self.engine.connect() as conn:
            row = conn.execute(select(users_table.c.id).where(users_table.c.username == username)).fetchone()
        return row is not None

    def list_users(self) -> list[User]:
        """Return all users ordered by username."""
        with self.engine.connect() as conn:
            rows = conn.execute(users_table.select().order_by(users_table.c.username)).fetchall()
        return [_row_to_user(r) for r in rows]

    def count_users(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(users_table)).scalar()
        return result or 0


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        name=row.name,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
    )
