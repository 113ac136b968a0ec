"""
Global middleware and exception handlers.

Every failure leaves the API in the error envelope; outside production the
envelope also carries the formatted traceback.
"""

from __future__ import annotations

import logging
import time
import traceback
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from database.users import is_unique_violation
from utils.enums import ErrorCode
from utils.errors import ApiError
from utils.schemas import ApiErrorResponse

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response


def _phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_response(
    request: Request,
    status_code: int,
    message: str,
    code: Optional[ErrorCode] = None,
    exc: Optional[BaseException] = None,
) -> JSONResponse:
    body = ApiErrorResponse(
        message=message,
        error=_phrase(status_code),
        code=code,
        path=request.url.path,
    )
    if exc is not None and not request.app.state.settings.is_production:
        body.stack = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %r", request.method, request.url.path, exc)
        else:
            logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
        return error_response(request, exc.status_code, exc.message, exc.code, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request body"
        if errors:
            first = errors[0]
            loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
            message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
        logger.info("%s %s -> 400 %s", request.method, request.url.path, message)
        return error_response(request, 400, message, ErrorCode.VALIDATION_ERROR, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(
                request, 404, f"Route {request.url.path} not found", ErrorCode.ROUTE_NOT_FOUND
            )
        return error_response(request, exc.status_code, str(exc.detail))

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        if not is_unique_violation(exc):
            logger.error("Integrity error on %s: %s", request.url.path, exc.orig)
            return error_response(
                request, 500, "Internal Server Error", ErrorCode.INTERNAL_ERROR, exc
            )
        logger.warning("Unhandled unique violation on %s: %s", request.url.path, exc.orig)
        return error_response(
            request, 409, "Resource already exists", ErrorCode.USER_ALREADY_EXISTS, exc
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            request, 500, "Internal Server Error", ErrorCode.INTERNAL_ERROR, exc
        )
