"""
Auth API routes — register, login, current user.

Route prefix: {api_prefix}/auth
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth.dependencies import get_auth_service, get_current_user_id
from auth.service import AuthService
from utils.schemas import (
    ApiResponse,
    AuthPayload,
    CurrentUserPayload,
    LoginRequest,
    RegisterRequest,
)

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse[AuthPayload],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse:
    """Register a new user."""
    result = await service.register(req.email, req.password, req.name)
    return ApiResponse.build(status.HTTP_201_CREATED, "User registered successfully", result)


@router.post("/login", response_model=ApiResponse[AuthPayload])
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse:
    """Login with email + password."""
    result = await service.login(req.email, req.password)
    return ApiResponse.build(status.HTTP_200_OK, "Login successful", result)


@router.get("/me", response_model=ApiResponse[CurrentUserPayload])
async def me(
    user_id: str = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse:
    """Return the user the bearer token belongs to."""
    user = await service.get_current_user(user_id)
    return ApiResponse.build(
        status.HTTP_200_OK,
        "User data retrieved successfully",
        CurrentUserPayload(user=user),
    )
