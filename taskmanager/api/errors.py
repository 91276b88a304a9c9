"""
Exception handlers.

Maps every failure to the standard ``{"success": false, "message": ...}``
envelope. Unexpected errors are logged with their traceback and reported to
Sentry, but the client only ever sees a generic message.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskmanager.api.schemas import error_body
from taskmanager.core.errors import InternalError, TaskManagerError, ValidationError
from taskmanager.integrations.sentry import capture_exception

logger = logging.getLogger(__name__)


def first_validation_message(exc: RequestValidationError) -> str:
    """
    Human-readable message for the first failed rule.
    
    ``("body", "password")`` + ``"Value error, too short"`` becomes
    ``"password: too short"``.
    """
    errors = exc.errors()
    if not errors:
        return ValidationError.message
    
    error = errors[0]
    message = str(error.get("msg", ValidationError.message)).removeprefix("Value error, ")
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def handle_app_error(request: Request, exc: TaskManagerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = first_validation_message(exc)
    logger.debug(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=ValidationError.status_code, content=error_body(message))


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        message = "Route not found"
    elif exc.status_code == 405:
        message = "Method not allowed"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    capture_exception(exc, path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content=error_body(InternalError.message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskManagerError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
