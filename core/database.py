"""
core/database.py -- Engine construction shared by every store.

The engine is built once (FastAPI lifespan or CLI entry point) and passed into
UserStore and NoteStore. No module holds a global connection; whoever calls
create_db_engine() owns the engine and disposes it on shutdown.

Usage:
    engine = create_db_engine("sqlite:///notekeeper.db")
    users = UserStore(engine)
    notes = NoteStore(engine)
    ...
    engine.dispose()

Document ids are 24 hex characters (12 random bytes), the shape API clients
already expect for note and user ids. New ids are lowercase; ids coming in
from clients are accepted in either case and lowercased before lookup.
"""

from __future__ import annotations

import logging
import re
import secrets

from sqlalchemy import MetaData, create_engine, event, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("notekeeper.db")

_OBJECT_ID_RE = re.compile(r"^[0-9a-f]{24}$", re.IGNORECASE)

# Shared by auth/store.py and notes/store.py so notes.user_id can reference
# users.id as a real foreign key.
metadata = MetaData()


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode and foreign key enforcement.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool. foreign_keys is off by default in SQLite.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(db_url: str) -> Engine:
    """Create an Engine for db_url with SQLite-specific setup when applicable."""
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def new_object_id() -> str:
    return secrets.token_hex(12)


def is_valid_object_id(value: str) -> bool:
    """Return True if value has the shape of a document id (24 hex chars)."""
    return bool(_OBJECT_ID_RE.match(value))


def ping(engine: Engine) -> bool:
    """Return True if the database answers a trivial query. Used by /health."""
    try:
        with engine.connect() as conn:
            conn.execute(select(1))
    except SQLAlchemyError:
        logger.exception("Database ping failed")
        return False
    return True
