"""
api/routes/users.py -- User registration and listing.

Routes:
  POST /api/users  -- register a new user (public)
  GET  /api/users  -- list users with the ids of their notes (public)

Registration never does a check-then-create: UserStore.create_user() relies on
the UNIQUE constraint and raises DuplicateUsername, which api/main.py renders
as 400 "expected `username` to be unique".
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from api.models import UserCreate, UserResponse
from auth.models import User
from auth.passwords import hash_password
from auth.store import UserStore
from notes.store import NoteStore

logger = logging.getLogger("notekeeper.api")

router = APIRouter()


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(request: Request, body: UserCreate) -> UserResponse:
    """Register an account. The password is stored only as a bcrypt digest."""
    user_store: UserStore = request.app.state.user_store
    user = user_store.create_user(body.username, body.name, hash_password(body.password))
    logger.info("Registered user_id=%s username=%r", user.id, user.username)
    return _user_to_response(user, [])


@router.get("/users", response_model=list[UserResponse])
def list_users(request: Request) -> list[UserResponse]:
    user_store: UserStore = request.app.state.user_store
    note_store: NoteStore = request.app.state.note_store
    owned = note_store.note_ids_by_user()
    return [_user_to_response(u, owned.get(u.id, [])) for u in user_store.list_users()]


def _user_to_response(user: User, note_ids: list[str]) -> UserResponse:
    return UserResponse(id=user.id, username=user.username, name=user.name, notes=note_ids)
