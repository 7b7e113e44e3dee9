"""
core/errors.py -- Typed error taxonomy for notekeeper.

Every failure the auth and note layers can report to a client is one of
these classes. Each carries the HTTP status, a machine-readable code and a
client-safe message; api/main.py renders them into the uniform envelope

    {"error": <message>, "code": <code>, "details": [...]}

Nothing else from an exception (stack, store error, hash internals) reaches
the response body.

Layer rule: core/ is the kernel. No imports from api/, auth/, or notes/.
"""

from __future__ import annotations


class NoteKeeperError(Exception):
    """Base class. Subclasses override status_code, code and default message."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "internal error"

    def __init__(self, message: str | None = None, details: list[str] | None = None) -> None:
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class ValidationError(NoteKeeperError):
    """Malformed or missing input. `details` lists every violation found."""

    status_code = 400
    code = "validation_error"
    message = "request validation failed"


class DuplicateUsername(ValidationError):
    """Registration hit the UNIQUE constraint on users.username."""

    code = "duplicate_username"
    message = "expected `username` to be unique"


class InvalidCredentials(NoteKeeperError):
    """Login failed. Same message for unknown user and wrong password."""

    status_code = 401
    code = "invalid_credentials"
    message = "invalid username or password"


class Unauthenticated(NoteKeeperError):
    status_code = 401
    code = "unauthenticated"
    message = "token missing or invalid"


class Forbidden(NoteKeeperError):
    status_code = 403
    code = "forbidden"
    message = "forbidden"


class NotFound(NoteKeeperError):
    status_code = 404
    code = "not_found"
    message = "not found"
