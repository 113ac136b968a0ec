"""
FastAPI dependencies for authentication.

Provides the settings / repository / service wiring and the
``get_current_user_id`` bearer-token dependency used by protected routes.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import TokenError, decode_token
from auth.service import AuthService
from config.settings import Settings
from database.session import get_db_session
from database.users import UserRepository
from utils.enums import ErrorCode
from utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_user_repository(
    session: AsyncSession = Depends(get_db_session),
) -> UserRepository:
    return UserRepository(session)


async def get_auth_service(
    repository: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(repository, settings)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> str:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``user_id`` (UUID string).
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access denied. No token provided", ErrorCode.INVALID_TOKEN)

    try:
        return decode_token(credentials.credentials, settings)
    except TokenError as exc:
        logger.info("Rejected bearer token (%s): %s", exc.reason, exc)
        raise AuthenticationError("Invalid or expired token", ErrorCode.INVALID_TOKEN) from exc
