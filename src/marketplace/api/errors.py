"""Translate marketplace exceptions into HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ProteanException, ValidationError

from marketplace.domain import logger
from marketplace.shared.errors import (
    InsufficientStockError,
    InvalidStateTransitionError,
    NotAuthorizedError,
    PersistenceError,
)

ERROR_STATUS_CODES: dict[type, int] = {
    ValidationError: 400,
    NotAuthorizedError: 403,
    ObjectNotFoundError: 404,
    InsufficientStockError: 409,
    InvalidStateTransitionError: 409,
    InvalidOperationError: 409,
    PersistenceError: 503,
}


def status_code_for(exc: Exception) -> int:
    """Most specific status code registered for the exception's class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ProteanException)
    async def marketplace_error_handler(request: Request, exc: ProteanException) -> JSONResponse:
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error("Request failed", path=request.url.path, error_type=type(exc).__name__, error=str(exc))
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.messages, "error_type": type(exc).__name__},
        )
