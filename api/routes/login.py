"""
api/routes/login.py -- Password login.

Routes:
  POST /api/login  -- exchange username/password for a bearer token

Security:
  Rate-limited per client IP (Settings.login_rate_limit). @limiter.limit must
  sit under @router.post so the registered endpoint checks the limit itself.
  auth.tokens.login() provides timing equalization -- use it, never inline
  get_by_username() + verify_password().
  Unknown username and wrong password both surface as InvalidCredentials,
  i.e. 401 "invalid username or password".
  Cache-Control: no-store on success so the token is not cached.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from api.limiter import limiter
from api.models import LoginRequest, LoginResponse
from auth.store import UserStore
from auth.tokens import login as password_login
from core.config import get_settings

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@limiter.limit(lambda: get_settings().login_rate_limit)
def login(request: Request, response: Response, body: LoginRequest) -> LoginResponse:
    """Authenticate with username and password; return a signed token."""
    user_store: UserStore = request.app.state.user_store
    result = password_login(user_store, body.username, body.password)
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(token=result.token, username=result.user.username, name=result.user.name)
