"""
auth/passwords.py -- bcrypt password hashing.

bcrypt is used directly rather than through passlib: passlib's wrap-bug
detection builds a password longer than 72 bytes, which bcrypt 4.x rejects.

Digests are self-describing ($2b$<cost>$<salt><hash>), so verification needs
no state besides the stored digest. The cost factor comes from
Settings.bcrypt_rounds (10 by default).

Layer rule: no imports from api/ or notes/.
"""

from __future__ import annotations

import bcrypt

from core.config import get_settings

# bcrypt's input limit is in bytes, not characters. bcrypt 5 raises on
# anything longer instead of truncating.
PASSWORD_MAX_BYTES = 72


def password_too_long(plain: str) -> bool:
    """Return True if plain does not fit in bcrypt's input once UTF-8 encoded."""
    return len(plain.encode("utf-8")) > PASSWORD_MAX_BYTES


def hash_password(plain: str) -> str:
    """Return a salted bcrypt digest of the given plaintext password.

    Callers reject passwords for which password_too_long() is True first.
    Both UserCreate and the create-user CLI command do.
    """
    rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt digest.

    Any malformed digest (wrong prefix, truncated, not ASCII) yields False, and
    so does a plaintext over PASSWORD_MAX_BYTES: no stored digest can match it.
    """
    if password_too_long(plain):
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError, UnicodeEncodeError):
        return False


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones. authenticate_user() verifies against this when
# the username does not exist.
DUMMY_HASH: str = hash_password("notekeeper_timing_dummy")
