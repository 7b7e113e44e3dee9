"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Only one auth method: an `Authorization: Bearer <token>` header carrying a JWT
from POST /api/login. The gate is a pure, synchronous check on the token
itself -- no store lookup -- and runs before the route handler body, so a
rejected request never reaches a data mutation.

  no header / not Bearer   -> Unauthenticated("token missing or invalid")
  undecodable / bad sig    -> Unauthenticated("token missing or invalid")
  expired                  -> Unauthenticated("token expired")
  valid                    -> AuthenticatedUser on request.state.user

Routes that allow anonymous access (note reads) simply do not declare
get_current_user.

Layer rule: may import from fastapi because this module is part of the
FastAPI dependency injection system. No imports from api/ or notes/.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import AuthenticatedUser
from auth.tokens import TOKEN_INVALID, verify_token
from core.errors import Unauthenticated


def extract_bearer_token(request: Request) -> str | None:
    """Return the raw token from the Authorization header, or None if absent."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(request: Request) -> AuthenticatedUser:
    """Require a valid bearer token. Raises Unauthenticated otherwise.

    Use as a FastAPI dependency:
        @router.post("/notes")
        def route(current_user: AuthenticatedUser = Depends(get_current_user)): ...
    """
    token = extract_bearer_token(request)
    if token is None:
        raise Unauthenticated(TOKEN_INVALID)
    identity = verify_token(token)
    request.state.user = identity
    return identity
