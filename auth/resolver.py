"""Session resolution: opaque token to public user identity, or anonymous.

The resolver never raises to its caller. Every path, store faults
included, ends in a Resolution, and ``resolve`` reduces that to the
identity or None. A None result only means "not authenticated in this
request"; it says nothing about whether an account exists.
"""

from dataclasses import dataclass
from enum import Enum

from auth.security_logger import SecurityEvent, SecurityLogger
from auth.stores import SessionStore, UserStore
from auth.types import Session, User, UserIdentity


class ResolveOutcome(Enum):
    RESOLVED = "resolved"
    NO_TOKEN = "no_token"
    NO_SESSION = "no_session"
    DANGLING_USER = "dangling_user"
    STORE_FAULT = "store_fault"


@dataclass(frozen=True)
class Resolution:
    """Result of looking up a session token."""

    outcome: ResolveOutcome
    identity: UserIdentity | None = None
    session: Session | None = None
    user: User | None = None
    error: Exception | None = None

    @property
    def authenticated(self) -> bool:
        return self.outcome is ResolveOutcome.RESOLVED


class SessionResolver:
    """Maps a session token to a UserIdentity.

    Stores are injected so any backend (or an in-memory fake) can be
    used. Neither store is written to.
    """

    def __init__(
        self,
        sessions: SessionStore,
        users: UserStore,
        security_logger: SecurityLogger | None = None,
    ):
        self._sessions = sessions
        self._users = users
        self._security_logger = security_logger or SecurityLogger()

    def lookup(self, token: str | None) -> Resolution:
        """Resolve a token and report which path was taken.

        Store exceptions are captured into a STORE_FAULT resolution and
        logged with their traceback.
        """
        if not token:
            return Resolution(ResolveOutcome.NO_TOKEN)

        try:
            resolution = self._lookup_stores(token)
        except Exception as e:
            self._security_logger.log(
                SecurityEvent.STORE_FAULT,
                token=token,
                details={"error_type": type(e).__name__},
                error=e,
            )
            return Resolution(ResolveOutcome.STORE_FAULT, error=e)

        if resolution.outcome is ResolveOutcome.RESOLVED:
            self._security_logger.log(
                SecurityEvent.SESSION_RESOLVED, token=token, user_id=resolution.user.id
            )
        elif resolution.outcome is ResolveOutcome.NO_SESSION:
            self._security_logger.log(SecurityEvent.SESSION_NOT_FOUND, token=token)
        elif resolution.outcome is ResolveOutcome.DANGLING_USER:
            self._security_logger.log(
                SecurityEvent.SESSION_USER_MISSING,
                token=token,
                user_id=resolution.session.user_id,
            )
        return resolution

    def _lookup_stores(self, token: str) -> Resolution:
        session = self._sessions.find_valid_session(token)
        if session is None:
            return Resolution(ResolveOutcome.NO_SESSION)

        user = self._users.find_user_by_id(session.user_id)
        if user is None:
            return Resolution(ResolveOutcome.DANGLING_USER, session=session)

        return Resolution(
            ResolveOutcome.RESOLVED,
            identity=UserIdentity.from_user(user),
            session=session,
            user=user,
        )

    def resolve(self, token: str | None) -> UserIdentity | None:
        """Identity for token, or None for anonymous. Never raises."""
        return self.lookup(token).identity
