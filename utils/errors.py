"""
API error taxonomy.

Every expected failure is raised as an ``ApiError`` (or one of its
subclasses) and rendered into the error envelope by the handlers in
``api.middleware``.
"""

from __future__ import annotations

from typing import Optional

from utils.enums import ErrorCode


class ApiError(Exception):
    """Error carrying an HTTP status, a client-safe message and an optional code."""

    status_code: int = 500
    default_code: Optional[ErrorCode] = None

    def __init__(
        self,
        status_code: Optional[int] = None,
        message: str = "Internal Server Error",
        code: Optional[ErrorCode] = None,
        is_operational: bool = True,
    ) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        self.code = code or self.default_code
        # False for programming defects; informational only.
        self.is_operational = is_operational

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code}, "
            f"message={self.message!r}, code={self.code})"
        )


class ValidationError(ApiError):
    status_code = 400
    default_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message=message, code=code)


class AuthenticationError(ApiError):
    status_code = 401
    default_code = ErrorCode.AUTHENTICATION_FAILED

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message=message, code=code)


class NotFoundError(ApiError):
    status_code = 404
    default_code = ErrorCode.USER_NOT_FOUND

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message=message, code=code)


class ConflictError(ApiError):
    status_code = 409
    default_code = ErrorCode.USER_ALREADY_EXISTS

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message=message, code=code)


class InternalError(ApiError):
    status_code = 500
    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(message=message, is_operational=False)
