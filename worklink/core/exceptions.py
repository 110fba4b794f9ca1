"""
Domain error taxonomy.

Services raise these instead of HTTP exceptions; ``register_exception_handlers``
maps each class to its HTTP status and a ``{"error": ..., "details": ...}`` body.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class WorkLinkError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(WorkLinkError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthenticationError(WorkLinkError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed"


class AuthorizationError(WorkLinkError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(WorkLinkError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(WorkLinkError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class DatabaseError(WorkLinkError):
    default_message = "Database operation failed"


def error_body(message: str, details: Any = None) -> dict:
    body: dict = {"error": message}
    if details:
        body["details"] = details
    return body


async def worklink_error_handler(request: Request, exc: WorkLinkError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}

    if exc.status_code >= 500:
        # Internal details are logged, never returned
        logger.error("Request failed: %s", exc.message, exc_info=exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(WorkLinkError.default_message),
        )

    logger.info("Request rejected with %s: %s", exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.details),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            # drop the leading "body" / "query" / "path" segment
            "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ValidationError.default_message, details),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(WorkLinkError.default_message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WorkLinkError, worklink_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
