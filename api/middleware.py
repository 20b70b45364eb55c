"""Request-scoped middleware and the request-context log filter."""

import logging
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from utils.user_context import get_current_user_id_or_none

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    """Request ID of the request being served, if any."""
    return _request_id.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns a unique request ID to every request.

    The ID is stored on request.state, exposed to log records through
    RequestContextLogFilter, and echoed in the X-Request-ID response header.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id
        reset_token = _request_id.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _request_id.reset(reset_token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestContextLogFilter(logging.Filter):
    """Adds ``request_id`` and ``auth_user_id`` to every record ("-" when unset)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get() or "-"
        user_id = get_current_user_id_or_none()
        record.auth_user_id = "-" if user_id is None else user_id
        return True
