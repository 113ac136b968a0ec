"""
Pydantic schemas for the auth API: request bodies, the public user view,
and the success / error envelopes.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from utils.enums import ErrorCode, Role

T = TypeVar("T")


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class CamelModel(BaseModel):
    """Serializes to camelCase JSON keys, accepts either form on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════

# Fields default to empty so that missing values reach the field validators
# and produce their messages ("Email is required", ...).


class RegisterRequest(BaseModel):
    email: str = ""
    password: str = ""
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


# ═══════════════════════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════════════════════


class UserPublic(CamelModel):
    """A stored user minus the password hash.  Never persisted."""

    id: str
    email: str
    name: Optional[str] = None
    role: Role = Role.USER
    created_at: datetime
    updated_at: datetime


class AuthPayload(BaseModel):
    user: UserPublic
    token: str


class CurrentUserPayload(BaseModel):
    user: UserPublic


def to_public_user(user: Any) -> UserPublic:
    """Project a stored user row onto the public view."""
    return UserPublic(
        id=str(user.id),
        email=user.email,
        name=user.name,
        role=user.role,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def is_admin(user: Any) -> bool:
    return user.role == Role.ADMIN


def display_name(user: Any) -> str:
    return user.name or user.email.split("@")[0]


def is_profile_complete(user: Any) -> bool:
    return bool(user.name and user.email)


# ═══════════════════════════════════════════════════════════════════════════════
# Envelopes
# ═══════════════════════════════════════════════════════════════════════════════


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope.  ``success`` always follows ``status_code < 400``."""

    status_code: int = Field(200, exclude=True)
    success: bool = True
    message: str
    data: Optional[T] = None

    @classmethod
    def build(cls, status_code: int, message: str, data: Any = None) -> "ApiResponse":
        return cls(status_code=status_code, success=status_code < 400, message=message, data=data)


class ApiErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str
    code: Optional[ErrorCode] = None
    timestamp: str = Field(default_factory=_utcnow_iso)
    path: Optional[str] = None
    stack: Optional[List[str]] = None


class HealthResponse(BaseModel):
    success: bool = True
    message: str = "Server is running!"
    timestamp: str = Field(default_factory=_utcnow_iso)


# ═══════════════════════════════════════════════════════════════════════════════
# Pagination
# ═══════════════════════════════════════════════════════════════════════════════


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    pagination: Pagination


def create_pagination(page: int, limit: int, total: int) -> Pagination:
    total_pages = math.ceil(total / limit) if limit else 0
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
