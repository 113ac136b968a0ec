"""
Input validators for user-facing fields.

Each validator is a pure function returning a ``ValidationResult``;
callers decide whether to raise.  Nothing here touches the database.
"""

from __future__ import annotations

import re
import uuid
from typing import NamedTuple, Optional

from utils.enums import ValidationConstants

_EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
_NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
_WHITESPACE_RE = re.compile(r"\s+")


class ValidationResult(NamedTuple):
    is_valid: bool
    error: Optional[str] = None


class PaginationResult(NamedTuple):
    is_valid: bool
    error: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None


_OK = ValidationResult(True)


def validate_email(email: Optional[str]) -> ValidationResult:
    if not email:
        return ValidationResult(False, "Email is required")

    max_len = ValidationConstants.EMAIL_MAX_LENGTH
    if len(email) > max_len:
        return ValidationResult(False, f"Email must not exceed {max_len} characters")

    if not _EMAIL_RE.fullmatch(email.strip()):
        return ValidationResult(False, "Invalid email format")

    return _OK


def validate_password(password: Optional[str]) -> ValidationResult:
    """8–128 chars with at least one uppercase, one lowercase and one digit."""
    if not password:
        return ValidationResult(False, "Password is required")

    min_len = ValidationConstants.PASSWORD_MIN_LENGTH
    max_len = ValidationConstants.PASSWORD_MAX_LENGTH
    if len(password) < min_len:
        return ValidationResult(False, f"Password must be at least {min_len} characters long")
    if len(password) > max_len:
        return ValidationResult(False, f"Password must not exceed {max_len} characters")

    if not re.search(r"[A-Z]", password):
        return ValidationResult(False, "Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        return ValidationResult(False, "Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        return ValidationResult(False, "Password must contain at least one number")

    return _OK


def validate_name(name: Optional[str]) -> ValidationResult:
    """Name is optional; when given it is checked after trimming."""
    if name is None or name == "":
        return _OK

    trimmed = name.strip()
    min_len = ValidationConstants.NAME_MIN_LENGTH
    max_len = ValidationConstants.NAME_MAX_LENGTH
    if len(trimmed) < min_len:
        return ValidationResult(False, f"Name must be at least {min_len} character long")
    if len(trimmed) > max_len:
        return ValidationResult(False, f"Name must not exceed {max_len} characters")

    if not _NAME_RE.fullmatch(trimmed):
        return ValidationResult(
            False, "Name can only contain letters, spaces, hyphens, and apostrophes"
        )

    return _OK


def validate_user_id(user_id: Optional[str]) -> ValidationResult:
    if not user_id:
        return ValidationResult(False, "User ID is required")
    try:
        uuid.UUID(str(user_id))
    except ValueError:
        return ValidationResult(False, "Invalid user ID format")
    return _OK


def validate_pagination(
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> PaginationResult:
    """
    Check page/limit bounds, filling in defaults for missing values.

    An out-of-range ``limit`` is rejected rather than clamped.
    """
    page = ValidationConstants.DEFAULT_PAGE if page is None else page
    limit = ValidationConstants.DEFAULT_LIMIT if limit is None else limit
    max_limit = ValidationConstants.MAX_LIMIT

    if page < 1:
        return PaginationResult(False, "Page must be greater than 0")
    if limit < 1:
        return PaginationResult(False, "Limit must be greater than 0")
    if limit > max_limit:
        return PaginationResult(False, f"Limit must not exceed {max_limit}")

    return PaginationResult(True, page=page, limit=limit)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def sanitize_string(value: str) -> str:
    """Trim and collapse internal whitespace runs to a single space."""
    return _WHITESPACE_RE.sub(" ", value.strip())
