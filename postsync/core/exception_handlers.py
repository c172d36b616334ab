"""Exception handlers for the mock posts service.

Every error leaves the service in one envelope: {"error", "message",
"details"}. Domain errors keep their error_code; the HTTP status comes from
_STATUS_BY_TYPE (most specific class first).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from postsync.core.config import get_settings
from postsync.domain.exceptions import (
    InvalidArgumentException,
    NotFoundException,
    OperationInProgressException,
    PostSyncException,
    TransportException,
    ValidationException,
)

logger = logging.getLogger(__name__)

_STATUS_BY_TYPE: tuple[tuple[type[PostSyncException], int], ...] = (
    (NotFoundException, 404),
    (InvalidArgumentException, 400),
    (ValidationException, 422),
    (OperationInProgressException, 409),
    (TransportException, 502),
)


def _error_response(
    status_code: int, error: str, message: Any, details: Any = None
) -> JSONResponse:
    content: dict[str, Any] = {"error": error, "message": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def status_for(exc: PostSyncException) -> int:
    """Return the HTTP status for a domain exception (400 when unmapped)."""
    for exc_type, status_code in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            return status_code
    return 400


def _postsync_exception_handler(
    request: Request, exc: PostSyncException
) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    body = exc.to_dict()
    return _error_response(status_code, body["error"], body["message"], body["details"])


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(422, "VALIDATION_ERROR", "Request validation failed", exc.errors())


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(exc.status_code, "HTTP_ERROR", exc.detail)


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; the exception text is exposed only when debug is on."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return _error_response(500, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the handlers on app (domain, request validation, HTTP, fallback)."""
    app.add_exception_handler(PostSyncException, _postsync_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
