"""
Auth Boilerplate API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_exception_handlers, register_middleware
from api.routes import root_router, router as health_router
from auth.routes import router as auth_router
from config.settings import Settings, get_settings
from database.session import (
    build_engine,
    build_session_factory,
    check_database_connection,
    init_models,
)

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("httpcore", "httpx", "asyncio"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        description="Email/password registration, login and current-user API.",
        docs_url="/api-docs",
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(auth_router, prefix=f"{settings.api_prefix}/auth")
    app.include_router(root_router)

    @app.on_event("startup")
    async def on_startup():
        logger.info("Starting %s in %s mode", settings.project_name, settings.environment)
        if not await check_database_connection(engine):
            logger.warning(
                "Server started but database connection failed; check DATABASE_URL"
            )
        elif settings.create_tables:
            await init_models(engine)
            logger.info("Database tables ensured")
        logger.info("API documentation: /api-docs  health: %s/health", settings.api_prefix)
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await engine.dispose()
        logger.info("Database engine disposed")

    return app


_settings = get_settings()
configure_logging(_settings)
app = create_app(_settings)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
        log_level="debug" if _settings.debug else "info",
    )
