"""
Error taxonomy.

Every failure a service can raise derives from InternHubError and carries the
HTTP status it maps to. The API layer renders them as
{"detail": <message>, "code": <code>} through `register_error_handlers`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."


@dataclass
class InternHubError(Exception):
    message: str
    code: str = "UNKNOWN"
    status_code: int = 400
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


@dataclass
class ValidationFailed(InternHubError):
    code: str = "VALIDATION_ERROR"
    status_code: int = 422
    field: Optional[str] = None


@dataclass
class DuplicateApplication(InternHubError):
    message: str = "You have already applied for this internship"
    code: str = "DUPLICATE_APPLICATION"
    status_code: int = 409


@dataclass
class DuplicateAccount(InternHubError):
    message: str = "This email is already registered. Please sign in instead."
    code: str = "DUPLICATE_ACCOUNT"
    status_code: int = 409


@dataclass
class IllegalStatusTransition(InternHubError):
    code: str = "ILLEGAL_TRANSITION"
    status_code: int = 409


@dataclass
class NotFound(InternHubError):
    code: str = "NOT_FOUND"
    status_code: int = 404


@dataclass
class AccessDenied(InternHubError):
    code: str = "ACCESS_DENIED"
    status_code: int = 403


@dataclass
class AuthenticationFailed(InternHubError):
    message: str = "Invalid email or password"
    code: str = "AUTH_FAILED"
    status_code: int = 401


@dataclass
class StoreError(InternHubError):
    message: str = GENERIC_FAILURE_MESSAGE
    code: str = "STORE_ERROR"
    status_code: int = 503


def first_validation_error(errors) -> ValidationFailed:
    """Collapse a pydantic error list into the first failing field."""
    if not errors:
        return ValidationFailed(message="Invalid input")
    err = errors[0]
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query")]
    msg = err.get("msg", "Invalid input")
    # pydantic prefixes messages raised from validators
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return ValidationFailed(message=msg, field=".".join(loc) or None)


def _render(exc: InternHubError) -> JSONResponse:
    body: Dict[str, Any] = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, ValidationFailed) and exc.field:
        body["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(InternHubError)
    async def handle_internhub_error(request: Request, exc: InternHubError):
        if isinstance(exc, StoreError):
            logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.context)
        return _render(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _render(first_validation_error(exc.errors()))

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_failure(request: Request, exc: SQLAlchemyError):
        logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
        return _render(StoreError(context={"error": type(exc).__name__}))
