"""Authentication guard for protected routes.

Unlike SessionResolver, which fails open to anonymous, the guard fails
closed: an unauthenticated request raises NotAuthenticatedError and a
broken store raises StoreError.
"""


from auth.exceptions import ForbiddenError, NotAuthenticatedError, StoreError
from auth.resolver import ResolveOutcome, SessionResolver
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.types import AuthResult, User


class AuthService:
    """Session checks with role and ownership rules.

    Handles:
    - Requiring an authenticated user (optionally an admin)
    - Letting anonymous requests through when a route allows it
    - Owner-or-admin access to per-user resources
    """

    def __init__(
        self,
        resolver: SessionResolver,
        security_logger: SecurityLogger | None = None,
    ):
        self._resolver = resolver
        self._security_logger = security_logger or SecurityLogger()

    @property
    def resolver(self) -> SessionResolver:
        return self._resolver

    def require_auth(
        self,
        token: str | None,
        *,
        require_admin: bool = False,
        allow_unauthenticated: bool = False,
    ) -> AuthResult:
        """Authenticate a request by its session token.

        Returns:
            AuthResult with session and user, or both None when
            allow_unauthenticated is set and there is no usable session.

        Raises:
            NotAuthenticatedError: no token, no valid session, or the
                session's user no longer exists.
            ForbiddenError: require_admin and the user is not an admin.
            StoreError: a store failed while looking up the session.
        """
        resolution = self._resolver.lookup(token)

        if resolution.outcome is ResolveOutcome.STORE_FAULT:
            raise StoreError("Session lookup failed") from resolution.error

        if not resolution.authenticated:
            if allow_unauthenticated:
                return AuthResult(session=None, user=None)
            raise NotAuthenticatedError("Authentication required")

        user = resolution.user
        if require_admin and not user.is_admin:
            self._security_logger.log(
                SecurityEvent.ACCESS_DENIED,
                token=token,
                user_id=user.id,
                details={"reason": "admin_required"},
            )
            raise ForbiddenError("Admin role required")

        return AuthResult(session=resolution.session, user=user)

    def ensure_user_access(self, target_user_id: int, user: User) -> None:
        """Allow admins, or the user acting on their own resources.

        Raises:
            ForbiddenError: user is neither admin nor the owner.
        """
        if user.is_admin:
            return
        if user.id != target_user_id:
            self._security_logger.log(
                SecurityEvent.ACCESS_DENIED,
                user_id=user.id,
                details={"reason": "not_owner", "target_user_id": target_user_id},
            )
            raise ForbiddenError("Access denied")
