"""
PASSWORD HASHING & VERIFICATION
===============================
bcrypt hashing for directory passwords.

FLOW:
- hash_password() creates a bcrypt hash before storage.
- verify_password() checks a login secret against the stored hash.

WHY:
- Directory rows never hold raw passwords.

HOW:
- bcrypt with a per-password salt. bcrypt only reads the first 72 bytes,
  so longer secrets are cut to that length on both sides.
"""

from __future__ import annotations

import bcrypt

BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_encode(password), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False
