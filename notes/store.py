"""
notes/store.py -- SQLAlchemy Core persistence layer for notes.

Pattern: Repository + Data Mapper (same as auth/store.py). NoteStore is the
repository; _row_to_note is the mapper. Route handlers never touch SQL.

Each mutation is a single statement, so concurrent writers to the same note
are last-write-wins at the database. notes.user_id is a foreign key to
users.id (enforced; see core/database._set_sqlite_pragmas).

Usage:
    store = NoteStore(create_db_engine(url))
    note = store.create_note(Note(content="HTML is easy", user_id=user.id))
    store.list_notes(important=True)
    store.delete_note(note.id)
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Column, ForeignKey, String, Table, Text, func, select
from sqlalchemy.engine import Engine

from core.database import metadata, new_object_id
from notes.models import Note

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

notes_table = Table(
    "notes",
    metadata,
    Column("id", String(24), primary_key=True),
    Column("content", Text, nullable=False),
    Column("important", Boolean, nullable=False, server_default="0"),
    Column("user_id", String(24), ForeignKey("users.id", ondelete="CASCADE"), index=True),
    Column("created_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class NoteStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine)

    def create_note(self, note: Note) -> Note:
        """Insert note and return a copy with id and created_at set.

        Raises sqlalchemy.exc.IntegrityError if user_id references no user.
        """
        stored = Note(
            id=new_object_id(),
            content=note.content,
            important=note.important,
            user_id=note.user_id,
            created_at=_now_iso(),
        )
        with self.engine.begin() as conn:
            conn.execute(
                notes_table.insert().values(
                    id=stored.id,
                    content=stored.content,
                    important=stored.important,
                    user_id=stored.user_id,
                    created_at=stored.created_at,
                )
            )
        return stored

    def get_note(self, note_id: str) -> Optional[Note]:
        with self.engine.connect() as conn:
            row = conn.execute(notes_table.select().where(notes_table.c.id == note_id)).fetchone()
        return _row_to_note(row) if row is not None else None

    def list_notes(self, important: Optional[bool] = None) -> list[Note]:
        """Return all notes, oldest first. Filter on importance when given."""
        query = notes_table.select().order_by(notes_table.c.created_at, notes_table.c.id)
        if important is not None:
            query = query.where(notes_table.c.important == important)
        with self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_note(r) for r in rows]

    def list_by_user(self, user_id: str) -> list[Note]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                notes_table.select().where(notes_table.c.user_id == user_id).order_by(notes_table.c.created_at)
            ).fetchall()
        return [_row_to_note(r) for r in rows]

    def note_ids_by_user(self) -> dict[str, list[str]]:
        """Map user_id -> ids of the notes that user owns, in one query.

        Used by GET /api/users to list each user's notes without N+1 lookups.
        """
        with self.engine.connect() as conn:
            rows = conn.execute(
                select(notes_table.c.user_id, notes_table.c.id)
                .where(notes_table.c.user_id.is_not(None))
                .order_by(notes_table.c.created_at)
            ).fetchall()
        owned: dict[str, list[str]] = defaultdict(list)
        for row in rows:
            owned[row.user_id].append(row.id)
        return dict(owned)

    def update_note(self, note_id: str, content: str, important: bool) -> Optional[Note]:
        """Replace content and importance. Returns the updated note, or None if absent."""
        with self.engine.begin() as conn:
            result = conn.execute(
                notes_table.update().where(notes_table.c.id == note_id).values(content=content, important=important)
            )
        if result.rowcount == 0:
            return None
        return self.get_note(note_id)

    def delete_note(self, note_id: str) -> bool:
        """Delete a note. Returns True if deleted, False if not found."""
        with self.engine.begin() as conn:
            result = conn.execute(notes_table.delete().where(notes_table.c.id == note_id))
        return result.rowcount > 0

    def count_notes(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(notes_table)).scalar()
        return result or 0


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_note(row) -> Note:
    return Note(
        id=row.id,
        content=row.content,
        important=bool(row.important),
        user_id=row.user_id,
        created_at=row.created_at,
    )
