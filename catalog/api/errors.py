"""API error taxonomy and the handlers that render it as ``{"message": ...}``.

Handlers never put internal exception detail into the response body; the
detail only goes to the log.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Generic client-facing messages per status code
DEFAULT_MESSAGES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "Invalid request",
    status.HTTP_401_UNAUTHORIZED: "Unauthorized",
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Something went wrong",
}


class ApiError(Exception):
    """Base error rendered to the client with a fixed status and message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = DEFAULT_MESSAGES[status.HTTP_500_INTERNAL_SERVER_ERROR]
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequestError(ApiError):
    """Malformed body, non-integer id or malformed header."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = DEFAULT_MESSAGES[status.HTTP_400_BAD_REQUEST]


class UnauthorizedError(ApiError):
    """Missing, malformed, invalid or expired token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = DEFAULT_MESSAGES[status.HTTP_401_UNAUTHORIZED]
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentialsError(UnauthorizedError):
    """Login attempt was rejected."""

    message = "Invalid credentials"


class NotFoundError(ApiError):
    """Unknown resource id or unmatched route."""

    status_code = status.HTTP_404_NOT_FOUND
    message = DEFAULT_MESSAGES[status.HTTP_404_NOT_FOUND]


class InternalError(ApiError):
    """Serialization or signing failure."""


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Build the standard failure envelope."""
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug(f"Invalid request for {request.method} {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, BadRequestError.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = DEFAULT_MESSAGES.get(exc.status_code)
    if message is None:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message, getattr(exc, "headers", None))


async def internal_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception for {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.message)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the shared exception handlers to the application."""
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, internal_exception_handler)
