"""
API request and response models for notekeeper REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
separate from the dataclasses in auth/models.py and notes/models.py, which own
the internal domain representation. Route handlers map between the two.

Request DTOs declare every required/optional field explicitly. FastAPI
validates the whole body before the handler runs and collects every
violation; api/main.py reports them all at once as a 400.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.passwords import PASSWORD_MAX_BYTES, password_too_long

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 3
NOTE_CONTENT_MIN_LENGTH = 5


# ---------------------------------------------------------------------------
# Errors / health
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    error: str
    code: str
    details: Optional[list[str]] = None


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserCreate(BaseModel):
    """Request body for POST /api/users."""

    username: str = Field(min_length=USERNAME_MIN_LENGTH, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        """Reject passwords over bcrypt's 72-byte input limit.

        Counted in UTF-8 bytes, so 40 accented letters already exceed it.
        """
        if password_too_long(value):
            raise ValueError(f"must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
        return value


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash."""

    id: str
    username: str
    name: Optional[str] = None
    notes: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /api/login.

    No password length limits here: a too-short or too-long password is just
    a wrong password and must get the same 401 as any other.
    """

    username: str = Field(max_length=255)
    password: str


class LoginResponse(BaseModel):
    token: str
    username: str
    name: Optional[str] = None


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


class NoteCreate(BaseModel):
    """Request body for POST /api/notes. content is required."""

    content: str = Field(min_length=NOTE_CONTENT_MIN_LENGTH, max_length=10_000)
    important: bool = False


class NoteUpdate(BaseModel):
    """Request body for PUT /api/notes/{id}. Replaces both fields."""

    content: str = Field(min_length=NOTE_CONTENT_MIN_LENGTH, max_length=10_000)
    important: bool = False


class NoteResponse(BaseModel):
    id: str
    content: str
    important: bool
    user: Optional[str] = None
    created_at: str
