"""Store interfaces the resolver depends on, plus an in-memory backend."""

import threading
from typing import Iterable, Protocol

from auth.types import Session, User
from utils.timezone import now_utc


class SessionStore(Protocol):
    def find_valid_session(self, token: str) -> Session | None: ...


class UserStore(Protocol):
    def find_user_by_id(self, user_id: int) -> User | None: ...


class MemoryStore:
    """Dict-backed session and user store.

    Implements both interfaces. Used by the test suite and for running
    the service locally without any data on disk.
    """

    def __init__(self, users: Iterable[User] = (), sessions: Iterable[Session] = ()):
        self._lock = threading.Lock()
        self._users = {user.id: user for user in users}
        self._sessions = {session.token: session for session in sessions}

    def add_user(self, user: User) -> None:
        with self._lock:
            self._users[user.id] = user

    def add_session(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.token] = session

    def remove_user(self, user_id: int) -> None:
        with self._lock:
            self._users.pop(user_id, None)

    def find_valid_session(self, token: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(token)
        if session is None or session.expires_at <= now_utc():
            return None
        return session

    def find_user_by_id(self, user_id: int) -> User | None:
        with self._lock:
            return self._users.get(user_id)
