"""
Authentication service: register, login, current user.

Each operation is a single linear pipeline that stops at the first
failure.  The service owns no state beyond its injected collaborators.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from auth.jwt import create_token
from auth.password import dummy_hash, hash_password, verify_password
from config.settings import Settings
from database.users import UserRepository, is_unique_violation
from utils.enums import ErrorCode
from utils.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from utils.schemas import AuthPayload, UserPublic, to_public_user
from utils.validators import (
    normalize_email,
    validate_email,
    validate_name,
    validate_password,
    validate_user_id,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
USER_EXISTS = "User with this email already exists"
USER_NOT_FOUND = "User not found"


def _raise_if_invalid(result) -> None:
    if not result.is_valid:
        raise ValidationError(result.error)


class AuthService:
    def __init__(self, repository: UserRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def register(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
    ) -> AuthPayload:
        _raise_if_invalid(validate_email(email))
        _raise_if_invalid(validate_password(password))
        _raise_if_invalid(validate_name(name))

        email = normalize_email(email)
        if await self.repository.get_by_email(email) is not None:
            raise ConflictError(USER_EXISTS, ErrorCode.USER_ALREADY_EXISTS)

        password_hash = await asyncio.to_thread(
            hash_password, password, self.settings.bcrypt_rounds
        )
        clean_name = name.strip() if name and name.strip() else None

        # The unique constraint is the real guard; a concurrent insert of the
        # same email lands here even though the pre-check above passed.
        try:
            user = await self.repository.create(
                email=email,
                password_hash=password_hash,
                name=clean_name,
            )
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            logger.info("Registration race lost for %s: %s", email, exc.orig)
            raise ConflictError(USER_EXISTS, ErrorCode.USER_ALREADY_EXISTS) from exc

        logger.info("Registered user %s", user.id)
        return AuthPayload(user=to_public_user(user), token=self._issue_token(user.id))

    async def login(self, email: str, password: str) -> AuthPayload:
        _raise_if_invalid(validate_email(email))
        if not password:
            raise ValidationError("Password is required")

        user = await self.repository.get_by_email(normalize_email(email))

        if user is None:
            # Burn a comparison so unknown emails cost the same as bad passwords.
            rounds = self.settings.bcrypt_rounds
            await asyncio.to_thread(lambda: verify_password(password, dummy_hash(rounds)))
            raise AuthenticationError(INVALID_CREDENTIALS, ErrorCode.AUTHENTICATION_FAILED)

        if not await asyncio.to_thread(verify_password, password, user.password):
            raise AuthenticationError(INVALID_CREDENTIALS, ErrorCode.AUTHENTICATION_FAILED)

        logger.info("Login: %s", user.id)
        return AuthPayload(user=to_public_user(user), token=self._issue_token(user.id))

    async def get_current_user(self, user_id: str) -> UserPublic:
        """Look up an already-authenticated user id."""
        if not validate_user_id(user_id).is_valid:
            raise NotFoundError(USER_NOT_FOUND, ErrorCode.USER_NOT_FOUND)

        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND, ErrorCode.USER_NOT_FOUND)
        return to_public_user(user)

    def _issue_token(self, user_id) -> str:
        return create_token(str(user_id), self.settings)
