"""
Enums and constants shared across the auth API.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class TokenType(str, Enum):
    """Token purposes.  Only ACCESS is issued today."""

    ACCESS = "access"
    REFRESH = "refresh"
    RESET_PASSWORD = "reset_password"
    EMAIL_VERIFICATION = "email_verification"


class ErrorCode(str, Enum):
    """Machine-readable codes carried in the error envelope."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ValidationConstants:
    PASSWORD_MIN_LENGTH = 8
    PASSWORD_MAX_LENGTH = 128
    NAME_MIN_LENGTH = 1
    NAME_MAX_LENGTH = 100
    EMAIL_MAX_LENGTH = 255

    DEFAULT_PAGE = 1
    DEFAULT_LIMIT = 10
    MAX_LIMIT = 100
