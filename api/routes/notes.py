"""
api/routes/notes.py -- Note CRUD routes.

Routes:
  GET    /api/notes        -- list all notes (public)
  GET    /api/notes/{id}   -- one note (public)
  POST   /api/notes        -- create a note owned by the caller (bearer token)
  PUT    /api/notes/{id}   -- replace content/importance (bearer token + owner)
  DELETE /api/notes/{id}   -- delete (bearer token + owner)

Auth policy:
  Reads are not owner-filtered: every note is globally readable. Writes go
  through get_current_user (401 before the handler runs) and, for existing
  notes, enforce_ownership (404 if absent, 403 if someone else's).

Ids are checked for shape before any lookup: a malformed id is a 400
"malformatted id", a well-formed id that matches nothing is a 404.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from api.models import NoteCreate, NoteResponse, NoteUpdate
from auth.dependencies import get_current_user
from auth.models import AuthenticatedUser
from auth.ownership import enforce_ownership
from auth.store import UserStore
from core.database import is_valid_object_id
from core.errors import NotFound, Unauthenticated, ValidationError
from notes.models import Note
from notes.store import NoteStore

logger = logging.getLogger("notekeeper.notes")

router = APIRouter()


def _require_object_id(note_id: str) -> str:
    if not is_valid_object_id(note_id):
        raise ValidationError("malformatted id")
    return note_id.lower()


def _note_to_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        content=note.content,
        important=note.important,
        user=note.user_id,
        created_at=note.created_at,
    )


# ---------------------------------------------------------------------------
# Public reads
# ---------------------------------------------------------------------------


@router.get("/notes", response_model=list[NoteResponse])
def list_notes(request: Request) -> list[NoteResponse]:
    note_store: NoteStore = request.app.state.note_store
    return [_note_to_response(n) for n in note_store.list_notes()]


@router.get("/notes/{note_id}", response_model=NoteResponse)
def get_note(request: Request, note_id: str) -> NoteResponse:
    note_store: NoteStore = request.app.state.note_store
    note = note_store.get_note(_require_object_id(note_id))
    if note is None:
        raise NotFound("note not found")
    return _note_to_response(note)


# ---------------------------------------------------------------------------
# Authenticated writes
# ---------------------------------------------------------------------------


@router.post("/notes", response_model=NoteResponse, status_code=201)
def create_note(
    request: Request,
    body: NoteCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> NoteResponse:
    """Create a note owned by the authenticated user.

    The token is stateless, so the owner is re-read from the store: a token
    for an account that no longer exists is treated as invalid.
    """
    user_store: UserStore = request.app.state.user_store
    note_store: NoteStore = request.app.state.note_store
    if user_store.get_by_id(current_user.user_id) is None:
        raise Unauthenticated()
    note = note_store.create_note(Note(content=body.content, important=body.important, user_id=current_user.user_id))
    logger.info("Created note %s for user_id=%s", note.id, current_user.user_id)
    return _note_to_response(note)


@router.put("/notes/{note_id}", response_model=NoteResponse)
def update_note(
    request: Request,
    note_id: str,
    body: NoteUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> NoteResponse:
    note_store: NoteStore = request.app.state.note_store
    note_id = _require_object_id(note_id)
    enforce_ownership(note_store.get_note(note_id), current_user, "note")
    updated = note_store.update_note(note_id, body.content, body.important)
    if updated is None:
        # Deleted between the ownership check and the update.
        raise NotFound("note not found")
    return _note_to_response(updated)


@router.delete("/notes/{note_id}", status_code=204)
def delete_note(
    request: Request,
    note_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> Response:
    note_store: NoteStore = request.app.state.note_store
    note_id = _require_object_id(note_id)
    enforce_ownership(note_store.get_note(note_id), current_user, "note")
    if not note_store.delete_note(note_id):
        raise NotFound("note not found")
    logger.info("Deleted note %s by user_id=%s", note_id, current_user.user_id)
    return Response(status_code=204)
