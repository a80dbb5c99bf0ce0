# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Exception taxonomy and FastAPI exception handlers.

Every error leaves the API in the same envelope:
    {"success": false, "error": "<message>", "error_code": <int>}
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CustomHTTPException(HTTPException):
    """HTTPException carrying an optional application error code."""

    def __init__(
        self,
        status_code: int,
        detail: Any = None,
        error_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationException(CustomHTTPException):
    """Malformed or out-of-range input, rejected before touching storage."""

    def __init__(self, detail: Any = "Validation failed"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundException(CustomHTTPException):
    """Row is missing or owned by another user; callers cannot tell which."""

    def __init__(self, detail: Any = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictException(CustomHTTPException):
    """Unique-name collision or a guarded delete of a referenced row."""

    def __init__(self, detail: Any = "Resource conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class AuthenticationException(CustomHTTPException):
    def __init__(self, detail: Any = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class MissingTokenException(AuthenticationException):
    def __init__(self, detail: Any = "Access denied. No token provided."):
        super().__init__(detail=detail)


class InvalidTokenException(AuthenticationException):
    def __init__(self, detail: Any = "Access denied. Invalid token."):
        super().__init__(detail=detail)


class TokenExpiredException(AuthenticationException):
    def __init__(self, detail: Any = "Access denied. Token expired."):
        super().__init__(detail=detail)


class AccountDeactivatedException(AuthenticationException):
    def __init__(self, detail: Any = "Access denied. User account is deactivated."):
        super().__init__(detail=detail)


class TransientStoreException(CustomHTTPException):
    """Database unavailable or connection pool exhausted; safe to retry."""

    def __init__(
        self, detail: Any = "Service temporarily unavailable, please retry later"
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            headers={"Retry-After": "1"},
        )


def _error_body(detail: Any, error_code: int, **extra: Any) -> Dict[str, Any]:
    body = {"success": False, "error": detail, "error_code": error_code}
    body.update(extra)
    return body


async def http_exception_handler(request: Request, exc: HTTPException):
    """Render any HTTPException (ours or Starlette's) in the error envelope."""
    error_code = getattr(exc, "error_code", None) or exc.status_code
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, error_code),
        headers=getattr(exc, "headers", None),
    )


def _format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request validation failures are client errors (400), not 422."""
    errors = _format_validation_errors(exc.errors())
    messages = ", ".join(
        f"{'.'.join(e['loc'][1:]) or '.'.join(e['loc'])}: {e['msg']}" for e in errors
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            f"Request parameter validation failed: {messages}",
            status.HTTP_400_BAD_REQUEST,
            errors=errors,
        ),
    )


def translate_store_error(exc: SQLAlchemyError) -> CustomHTTPException:
    """
    Map a storage-layer error onto the API exception taxonomy.

    Args:
        exc: SQLAlchemy error raised by the session or engine

    Returns:
        The CustomHTTPException the client should see
    """
    if isinstance(exc, IntegrityError):
        message = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
        if "unique" in message or "duplicate" in message:
            return ConflictException("Duplicate field value entered")
        if "foreign key" in message:
            return ValidationException("Referenced resource not found")
        if "not null" in message or "null value" in message:
            return ValidationException("Required field is missing")
        return ValidationException("Constraint violation")
    if isinstance(exc, (PoolTimeoutError, DisconnectionError, OperationalError)):
        return TransientStoreException()
    return CustomHTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    """Translate raw SQLAlchemy errors that escaped the service layer."""
    translated = translate_store_error(exc)
    if translated.status_code >= 500:
        logger.error("Storage error: %s", exc, exc_info=exc)
    else:
        logger.warning("Storage constraint error: %s", exc)
    return await http_exception_handler(request, translated)


async def python_exception_handler(request: Request, exc: Exception):
    """Fallback: log the detail server-side, return a generic message."""
    logger.error("Unhandled exception: %s", exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
    )


__all__ = [
    "CustomHTTPException",
    "ValidationException",
    "NotFoundException",
    "ConflictException",
    "AuthenticationException",
    "MissingTokenException",
    "InvalidTokenException",
    "TokenExpiredException",
    "AccountDeactivatedException",
    "TransientStoreException",
    "RequestValidationError",
    "StarletteHTTPException",
    "http_exception_handler",
    "validation_exception_handler",
    "store_exception_handler",
    "python_exception_handler",
    "translate_store_error",
]
