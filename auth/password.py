"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.  bcrypt only reads the first 72 bytes
of its input, so both hashing and verification truncate there.
"""

from __future__ import annotations

from functools import lru_cache

import bcrypt

DEFAULT_ROUNDS = 12
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (auto-salted, work factor 12 by default)."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode())
    except (ValueError, TypeError):
        # malformed stored hash
        return False


@lru_cache(maxsize=8)
def dummy_hash(rounds: int = DEFAULT_ROUNDS) -> str:
    """A throwaway hash at the given cost, compared against when no user matches."""
    return hash_password("dummy-password-never-matches", rounds)
