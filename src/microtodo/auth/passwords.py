"""
microtodo.auth.passwords

Password hashing (bcrypt, used directly).

Responsibilities:
- Hash new passwords with a per-password salt.
- Verify a candidate password against a stored hash.
- Provide a dummy hash so unknown-user logins cost the same as real ones.
"""

from __future__ import annotations

import bcrypt

from microtodo.auth.errors import InputValidationError

# bcrypt rejects longer input; multi-byte characters can exceed this under the
# 72-character schema limit.
MAX_PASSWORD_BYTES = 72


def hash_password(plain: str) -> str:
    raw = plain.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise InputValidationError("Password is too long")
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Corrupt or non-bcrypt hash on record, or an over-long password.
        return False


# Computed once at import so the first unknown-user login is not measurably slower.
DUMMY_HASH: str = hash_password("microtodo-timing-equalizer")
