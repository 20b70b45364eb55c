"""Typed exceptions for auth failures."""


class AuthError(Exception):
    """Base class for authentication/authorization errors."""


class NotAuthenticatedError(AuthError):
    """
    No usable session for this request.

    Raised for a missing token, an unknown or expired session, and a
    session whose user no longer exists. Callers can't tell these apart.
    """


class ForbiddenError(AuthError):
    """Authenticated, but not allowed to perform this action."""


class StoreError(AuthError):
    """
    A session or user store failed (I/O error, corrupt record).

    The strict guard lets this propagate. SessionResolver folds it into
    an anonymous result.
    """
