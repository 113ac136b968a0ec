"""
User store access: a thin async wrapper over the ``users`` table.

Callers pass already-normalized emails.  Uniqueness is enforced by the
table's unique constraint, so ``create`` may raise ``IntegrityError``;
``is_unique_violation`` tells a duplicate apart from other integrity failures.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User
from utils.enums import Role

logger = logging.getLogger(__name__)


UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when an ``IntegrityError`` comes from a unique constraint.

    The asyncpg adapter copies the SQLSTATE onto the wrapped error and keeps
    the driver's ``UniqueViolationError`` as its cause.
    """
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        if getattr(candidate, "sqlstate", None) == UNIQUE_VIOLATION:
            return True
        if getattr(candidate, "pgcode", None) == UNIQUE_VIOLATION:
            return True
        if type(candidate).__name__ == "UniqueViolationError":
            return True
    return "UNIQUE constraint failed" in str(orig)


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: str | uuid.UUID) -> Optional[User]:
        return await self._session.get(User, _to_uuid(user_id))

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        name: Optional[str] = None,
        role: Role = Role.USER,
    ) -> User:
        """Insert a user and flush so constraint violations surface here."""
        user = User(
            id=uuid.uuid4(),
            email=email,
            password=password_hash,
            name=name,
            role=role,
        )
        self._session.add(user)
        try:
            await self._session.flush()
        except Exception:
            # a failed flush leaves the transaction aborted
            await self._session.rollback()
            raise
        await self._session.refresh(user)
        logger.debug("Inserted user %s", user.id)
        return user
