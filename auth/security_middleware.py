"""Security middleware for FastAPI - session validation and user context."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from auth.service import AuthService
from auth.exceptions import ForbiddenError, NotAuthenticatedError, StoreError
from api.base import error_response, ErrorCodes
from utils.user_context import set_current_user_id, clear_current_user_id


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that validates the session and sets user context.

    For protected routes:
    1. Extracts session token from the session cookie
    2. Runs AuthService.require_auth (admin role under ADMIN_PREFIXES)
    3. Sets user and session on request.state and the user context
    4. Clears context after request completes

    Public paths bypass authentication entirely. GET /auth/me is public
    because it answers anonymous callers itself.
    """

    PUBLIC_PATHS = [
        "/auth/me",
        "/health",
        "/docs",
        "/openapi.json",
    ]

    ADMIN_PREFIXES = [
        "/admin/",
        "/api/admin/",
    ]

    def __init__(self, app, auth_service: AuthService, cookie_name: str = "session_token"):
        super().__init__(app)
        self._auth_service = auth_service
        self._cookie_name = cookie_name

    def _is_public_path(self, path: str) -> bool:
        """Check if path is in public paths list."""
        for public_path in self.PUBLIC_PATHS:
            if path == public_path or path.startswith(public_path + "/"):
                return True
        return False

    def _requires_admin(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.ADMIN_PREFIXES)

    def _reject(self, status_code: int, code: str, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=error_response(code, message).model_dump(mode="json"),
        )

    async def dispatch(self, request: Request, call_next):
        """Process request through middleware."""
        path = request.url.path

        # Skip auth for public paths
        if self._is_public_path(path):
            return await call_next(request)

        session_token = request.cookies.get(self._cookie_name)

        try:
            result = self._auth_service.require_auth(
                session_token,
                require_admin=self._requires_admin(path),
            )
        except NotAuthenticatedError:
            return self._reject(401, ErrorCodes.NOT_AUTHENTICATED, "Authentication required")
        except ForbiddenError:
            return self._reject(403, ErrorCodes.FORBIDDEN, "Admin role required")
        except StoreError:
            return self._reject(
                503, ErrorCodes.SERVICE_UNAVAILABLE, "Service temporarily unavailable"
            )

        set_current_user_id(result.user.id)
        request.state.user = result.user
        request.state.session = result.session

        try:
            response = await call_next(request)
            return response
        finally:
            # Always clear context
            clear_current_user_id()
