"""Translate raised errors into ``{"error": message}`` JSON responses."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from flixauth.core.errors import FlixAuthError
from flixauth.schemas.common import ErrorResponse

LOGGER = logging.getLogger(__name__)


def _error_body(message: str) -> dict:
    return ErrorResponse(error=message).model_dump()


async def flixauth_error_handler(request: Request, exc: FlixAuthError) -> JSONResponse:
    if exc.status_code >= 500:
        LOGGER.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    else:
        LOGGER.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    LOGGER.warning("Validation error on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content=_error_body("Invalid request body"))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.error("Unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FlixAuthError, flixauth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
