"""Structured error helpers for API responses."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError

logger = logging.getLogger(__name__)


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.payload = build_error_payload(self.code, self.message, details)
        super().__init__(self.message)


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"
    default_message = "Authentication required."


class InvalidTokenError(AppError):
    """Bearer token rejected (401); capability tokens pass status_code=400."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_TOKEN"
    default_message = "Token is invalid."


class ExpiredTokenError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "EXPIRED_TOKEN"
    default_message = "Token has expired."


class SetupIncompleteError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "SETUP_INCOMPLETE"
    default_message = "Account setup is not complete. Please use the setup link provided by your organization owner."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, details={"actionRequired": "COMPLETE_ACCOUNT_SETUP"})


class OrgContextRequiredError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ORG_CONTEXT_REQUIRED"
    default_message = "An active organization context is required for this operation. Please select an organization."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, details={"actionRequired": "SELECT_ORGANIZATION"})


class InsufficientRoleError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "INSUFFICIENT_ROLE"
    default_message = "Your role in this organization does not allow this operation."


class DuplicateEmailError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "DUPLICATE_EMAIL"
    default_message = "An account with this email already exists."


class UserExistsError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "USER_EXISTS"
    default_message = "A user with this email already exists and is active."


class AlreadyActiveError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "ALREADY_ACTIVE"
    default_message = "Account has already been set up. Please login."


class SoleOwnerViolationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "SOLE_OWNER_VIOLATION"
    default_message = "The organization must keep at least one active owner. Assign another owner first."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found."


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Invalid input."


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "SERVICE_UNAVAILABLE"
    default_message = "The service is temporarily unavailable."


class TransactionAbortedError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "TRANSACTION_ABORTED"
    default_message = "The operation could not be completed. It is safe to retry."


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.code, exc.message, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=build_error_payload("VALIDATION_ERROR", "Request validation failed.", {"errors": errors}),
    )


async def database_error_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    logger.error("Store error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=TransactionAbortedError.status_code,
        content=build_error_payload(TransactionAbortedError.code, TransactionAbortedError.default_message),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_payload(AppError.code, AppError.default_message),
    )


def register_exception_handlers(app) -> None:
    """Attach the error envelope handlers to a FastAPI app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(DBAPIError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
