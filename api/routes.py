"""
Service-level routes: health check and API root.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from auth.dependencies import get_app_settings
from config.settings import Settings
from utils.schemas import HealthResponse

router = APIRouter(tags=["health"])

root_router = APIRouter(include_in_schema=False)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@root_router.get("/")
async def root(settings: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
    return {
        "message": f"Welcome to {settings.project_name}!",
        "version": settings.version,
        "documentation": "/api-docs",
        "health": f"{settings.api_prefix}/health",
    }
