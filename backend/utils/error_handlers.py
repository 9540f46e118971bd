"""
Exception handlers for the HTTP boundary.

Every application error propagates out of the binding pipeline and the
services unchanged; this module is the single place that turns them into a
status code and the ``Message`` envelope.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from constants import HTTPStatus, TokenHeaders
from dtos.response.message_response import Message
from exceptions import (
    ApplicationError,
    AuthenticationError,
    AuthorizationError,
    BusinessRuleError,
    CollisionError,
    EmptyBodyError,
    NotFoundError,
    StructuralConfigError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins
STATUS_BY_ERROR = (
    (EmptyBodyError, HTTPStatus.BAD_REQUEST),
    (ValidationError, HTTPStatus.BAD_REQUEST),
    (CollisionError, HTTPStatus.CONFLICT),
    (NotFoundError, HTTPStatus.NOT_FOUND),
    (AuthenticationError, HTTPStatus.UNAUTHORIZED),
    (AuthorizationError, HTTPStatus.FORBIDDEN),
    (BusinessRuleError, HTTPStatus.BAD_REQUEST),
    (StructuralConfigError, HTTPStatus.INTERNAL_SERVER_ERROR),
)


def status_for(error: ApplicationError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


def error_data(error: ApplicationError):
    if isinstance(error, ValidationError):
        return error.violations
    if isinstance(error, CollisionError):
        return {"field": error.field, "value": error.value}
    return error.details or None


def envelope(status_code: int, message: str, data=None, headers=None) -> JSONResponse:
    body = Message.failure(message, data).model_dump()
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error(
            f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}",
            exc_info=exc
        )
        message = exc.message if isinstance(exc, StructuralConfigError) else "Internal server error"
    else:
        logger.warning(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")
        message = exc.message

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
        if exc.details.get("error"):
            headers[TokenHeaders.ERROR] = exc.details["error"]
    return envelope(status_code, message, error_data(exc), headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Path, query and form parameters rejected by FastAPI itself."""
    violations = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
            "rejected_value": error.get("input") if not isinstance(error.get("input"), (dict, list)) else None,
        }
        for error in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path} - invalid parameters: {len(violations)}")
    return envelope(HTTPStatus.BAD_REQUEST, "Request parameters failed validation", violations)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} - unexpected error: {exc}", exc_info=exc)
    return envelope(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        "Request failed. Please check server logs or contact support."
    )


def register_exception_handlers(app: FastAPI):
    """
    Install the envelope handlers on ``app``.

    Example:
        app = FastAPI()
        register_exception_handlers(app)
    """
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
