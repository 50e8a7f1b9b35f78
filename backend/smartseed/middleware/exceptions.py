"""Application exceptions and the handlers that turn them into responses.

Services raise the domain exceptions below; routers let them propagate.
Every error response has the same body:

    {"success": false, "error": "Human-readable message", "code": "ERROR_CODE"}
"""

import logging
from typing import Union

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class SmartSeedException(Exception):
    """Base exception for SmartSeed application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(self.message)


class ValidationError(SmartSeedException):
    """Missing or invalid request fields."""

    def __init__(self, message: str = "Missing required fields"):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
        )


class NotFoundError(SmartSeedException):
    """A referenced row does not exist."""

    def __init__(self, resource: str, identifier: str | None = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{message}: {identifier}"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
        )


class PreconditionError(SmartSeedException):
    """The entity is not in a state that allows the operation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="PRECONDITION_FAILED",
        )


class AuthenticationError(SmartSeedException):
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="INVALID_CREDENTIALS",
        )


class AccountDisabledError(SmartSeedException):
    def __init__(self, message: str = "Account is disabled"):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="ACCOUNT_DISABLED",
        )


def create_error_response(
    status_code: int,
    message: str,
    error_code: str = "ERROR",
    details: Union[dict, list, None] = None,
) -> JSONResponse:
    content = {"success": False, "error": message, "code": error_code}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _where(request: Request) -> dict:
    return {"path": request.url.path, "method": request.method}


async def smartseed_exception_handler(request: Request, exc: SmartSeedException) -> JSONResponse:
    logger.warning(
        "%s %s -> %s: %s", request.method, request.url.path, exc.error_code, exc.message,
        extra={"error_code": exc.error_code, **_where(request)},
    )
    return create_error_response(exc.status_code, exc.message, exc.error_code)


async def http_exception_handler(
    request: Request,
    exc: Union[HTTPException, StarletteHTTPException],
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail,
                     extra=_where(request))
    return create_error_response(exc.status_code, str(exc.detail), f"HTTP_{exc.status_code}")


async def validation_exception_handler(
    request: Request,
    exc: Union[RequestValidationError, PydanticValidationError],
) -> JSONResponse:
    """Body/query validation failures are client errors (400), not 422."""
    errors = [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning("Validation error on %s: %d field(s)", request.url.path, len(errors),
                   extra=_where(request))

    missing = [e["field"] for e in errors if e["type"] == "missing"]
    message = (
        "Missing required fields: " + ", ".join(missing) if missing else "Invalid request fields"
    )
    return create_error_response(
        status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR", {"errors": errors},
    )


# Substring of the driver message → (client message, code)
_INTEGRITY_MESSAGES = (
    ("unique", "A record with this value already exists", "DUPLICATE_RECORD"),
    ("foreign key", "Referenced record does not exist", "FOREIGN_KEY_VIOLATION"),
    ("not null", "Required field is missing", "NULL_VALUE_NOT_ALLOWED"),
)


async def database_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Constraint violations that slipped past the services' own checks."""
    driver_msg = str(getattr(exc, "orig", exc)).lower()
    logger.error("Integrity error on %s: %s", request.url.path, driver_msg, extra=_where(request))

    for needle, message, code in _INTEGRITY_MESSAGES:
        if needle in driver_msg:
            return create_error_response(status.HTTP_400_BAD_REQUEST, message, code)
    return create_error_response(
        status.HTTP_400_BAD_REQUEST, "Database constraint violation", "INTEGRITY_ERROR",
    )


async def operational_exception_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error("Database unavailable on %s: %s", request.url.path, exc, extra=_where(request))
    return create_error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Database temporarily unavailable. Please try again.",
        "DATABASE_UNAVAILABLE",
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Internal details stay in the log
    logger.error("Unhandled exception on %s", request.url.path, extra=_where(request), exc_info=exc)
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        "INTERNAL_SERVER_ERROR",
    )


def register_exception_handlers(app):
    app.add_exception_handler(SmartSeedException, smartseed_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, database_exception_handler)
    app.add_exception_handler(OperationalError, operational_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
