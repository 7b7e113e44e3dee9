"""
notes/models.py -- Domain dataclass for notes.

Pure data container. Business rules (ownership, validation) live in
auth/ownership.py and api/models.py.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Note:
    """A short text note.

    user_id is the owning user's id. It is None for notes inserted without an
    owner (e.g. from the CLI); those can be read but never mutated via the API.

    id is None before the record is written to the database.
    """

    content: str
    important: bool = False
    user_id: str | None = None
    id: str | None = None
    created_at: str = ""  # ISO 8601, set by store on insert
