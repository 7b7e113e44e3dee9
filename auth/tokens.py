"""
auth/tokens.py -- Token issuing, token verification, and password login.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       sub (user id), username, iat and exp. They are stateless: validity is
       signature + expiry, there is no session table and no revocation list.

  Verification raises Unauthenticated with one of two client messages:
       "token expired" when the signature is good but exp has passed, and
       "token missing or invalid" for everything else (garbage, bad signature,
       missing claims). The route layer turns that into a 401.

  Login: authenticate_user() always runs bcrypt, against DUMMY_HASH when the
       username does not exist, so response time does not reveal whether a
       username is registered. Unknown user and wrong password raise the same
       InvalidCredentials.

Layer rule: no imports from api/ or notes/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from jose import ExpiredSignatureError, JWTError, jwt

from auth.models import AuthenticatedUser, LoginResult, User
from auth.passwords import DUMMY_HASH, verify_password
from core.config import get_settings
from core.errors import InvalidCredentials, Unauthenticated

if TYPE_CHECKING:
    from auth.store import UserStore

logger = logging.getLogger("notekeeper.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

ALGORITHM = "HS256"

TOKEN_EXPIRED = "token expired"
TOKEN_INVALID = "token missing or invalid"


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def issue_token(user: User, ttl_seconds: int | None = None) -> str:
    """Encode a signed JWT for user.

    Args:
        user:        A stored user (id must be set).
        ttl_seconds: Lifetime in seconds. None uses
                     Settings.token_expire_seconds. A negative value yields an
                     already-expired token, which tests rely on.
    """
    if user.id is None:
        raise ValueError("cannot issue a token for an unsaved user")
    duration = _settings.token_expire_seconds if ttl_seconds is None else ttl_seconds
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "username": user.username,
        "iat": now,
        "exp": now + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=ALGORITHM)


def verify_token(token: str) -> AuthenticatedUser:
    """Decode and verify a JWT, returning the identity it carries.

    Raises Unauthenticated("token expired") for an expired but otherwise valid
    token and Unauthenticated("token missing or invalid") for anything else.
    """
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[ALGORITHM])
    except ExpiredSignatureError as exc:
        raise Unauthenticated(TOKEN_EXPIRED) from exc
    except JWTError as exc:
        raise Unauthenticated(TOKEN_INVALID) from exc

    user_id = payload.get("sub")
    username = payload.get("username")
    if not isinstance(user_id, str) or not isinstance(username, str):
        raise Unauthenticated(TOKEN_INVALID)
    return AuthenticatedUser(user_id=user_id, username=username)


# ---------------------------------------------------------------------------
# User authentication (constant-time)
# ---------------------------------------------------------------------------


def authenticate_user(store: UserStore, username: str, password: str) -> User:
    """Check a username/password pair with timing equalization.

    - Unknown username: bcrypt runs against DUMMY_HASH (same cost as a real check)
    - Wrong password: bcrypt runs against the real hash

    Returns the User on success, raises InvalidCredentials on any failure.
    """
    user = store.get_by_username(username)
    if user is None:
        # Equalize timing -- do NOT return early before running bcrypt
        verify_password(password, DUMMY_HASH)
        raise InvalidCredentials()
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentials()
    return user


def login(store: UserStore, username: str, password: str) -> LoginResult:
    """Authenticate and issue a token. Raises InvalidCredentials on failure."""
    try:
        user = authenticate_user(store, username, password)
    except InvalidCredentials:
        logger.info("Failed login for username=%r", username)
        raise
    logger.info("Login succeeded for user_id=%s", user.id)
    return LoginResult(token=issue_token(user), user=user)
