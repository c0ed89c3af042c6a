"""
Error taxonomy and JSON error handlers for the API.

Every failure surfaces as::

    {"success": false, "error": "<message>", "code": "<CODE>", "details": [...]}

``ErrorKind`` is the closed set of error variants; ``STATUS_CODES`` is the
single place that maps a variant to an HTTP status.  register_error_handlers()
wires AppError, request validation errors, Starlette HTTP errors and any
unhandled exception into that shape.
"""

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("use_case_api")


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION_ERROR"
    DUPLICATE = "DUPLICATE_ENTRY"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL = "INTERNAL_SERVER_ERROR"


STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE: 409,
    ErrorKind.INTERNAL: 500,
}

GENERIC_INTERNAL_MESSAGE = "An unexpected error occurred"


class AppError(Exception):
    """A classified, caller-recoverable (or internal) API error."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: list[dict[str, str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    @classmethod
    def validation(cls, details: list[dict[str, str]],
                   message: str = "Validation failed") -> "AppError":
        return cls(ErrorKind.VALIDATION, message, details)

    @classmethod
    def duplicate(cls, message: str = "A use case with this name already exists") -> "AppError":
        return cls(ErrorKind.DUPLICATE, message)

    @classmethod
    def not_found(cls, resource: str, ident: Any) -> "AppError":
        return cls(ErrorKind.NOT_FOUND, f"{resource} with id {ident} not found")

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized: Invalid or missing API key") -> "AppError":
        return cls(ErrorKind.UNAUTHORIZED, message)


def error_body(kind: ErrorKind, message: str,
               details: list[dict[str, str]] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "error": message, "code": kind.value}
    if details:
        body["details"] = details
    return body


def error_response(kind: ErrorKind, message: str,
                   details: list[dict[str, str]] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_CODES[kind],
        content=error_body(kind, message, details),
    )


def validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``[{field, message}]``.

    The location prefix ("body", "query", "path") is dropped so the field is
    the name the client sent, e.g. ``useCase`` or ``limit``.
    """
    details: list[dict[str, str]] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "header")]
        field = ".".join(loc) if loc else "body"
        details.append({"field": field, "message": err.get("msg", "Invalid value")})
    return details


_HTTP_STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.UNAUTHORIZED,
    404: ErrorKind.NOT_FOUND,
    405: ErrorKind.NOT_FOUND,
    409: ErrorKind.DUPLICATE,
}


def register_error_handlers(app: FastAPI, production: bool = False) -> None:
    """Install the JSON error handlers on *app*.

    Args:
        app: The FastAPI application.
        production: When True, messages of unclassified errors are replaced
            with a generic message.
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.kind is ErrorKind.INTERNAL:
            logger.error("internal_error path=%s message=%s", request.url.path, exc.message)
        message = exc.message
        if exc.kind is ErrorKind.INTERNAL and production:
            message = GENERIC_INTERNAL_MESSAGE
        return error_response(exc.kind, message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(ErrorKind.VALIDATION, "Validation failed", validation_details(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        kind = _HTTP_STATUS_KINDS.get(exc.status_code)
        if kind is None:
            kind = ErrorKind.INTERNAL if exc.status_code >= 500 else ErrorKind.VALIDATION
        if kind is ErrorKind.NOT_FOUND:
            message = "Route not found"
        else:
            message = str(exc.detail)
        return error_response(kind, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
        message = GENERIC_INTERNAL_MESSAGE if production else str(exc)
        return error_response(ErrorKind.INTERNAL, message)
