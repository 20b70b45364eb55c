"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from auth.exceptions import ForbiddenError, NotAuthenticatedError, StoreError

logger = logging.getLogger(__name__)


def _json_error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
        return _json_error(401, ErrorCodes.NOT_AUTHENTICATED, "Authentication required")

    @app.exception_handler(ForbiddenError)
    async def forbidden_handler(request: Request, exc: ForbiddenError):
        return _json_error(403, ErrorCodes.FORBIDDEN, str(exc) or "Access denied")

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"Auth store unavailable: {exc}")
        return _json_error(503, ErrorCodes.SERVICE_UNAVAILABLE, "Service temporarily unavailable")

    # ValidationError subclasses ValueError; a model failing inside the app is
    # a server fault, not a bad request
    @app.exception_handler(ValidationError)
    async def model_error_handler(request: Request, exc: ValidationError):
        logger.error(f"Model validation failed: {exc.title}", exc_info=exc)
        return _json_error(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _json_error(400, ErrorCodes.INVALID_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _json_error(422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _json_error(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
