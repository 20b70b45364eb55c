"""Propagate the authenticated user id through the call stack using contextvars."""

from contextvars import ContextVar

_current_user_id: ContextVar[int | None] = ContextVar("current_user_id", default=None)


def get_current_user_id_or_none() -> int | None:
    """Current user ID, or None for anonymous requests and outside requests."""
    return _current_user_id.get()


def set_current_user_id(user_id: int) -> None:
    """Set current user ID in context. Called by auth middleware."""
    _current_user_id.set(user_id)


def clear_current_user_id() -> None:
    """
    Clear user context.

    Must be called in a finally block to prevent context leakage
    between requests served by the same worker.
    """
    _current_user_id.set(None)
