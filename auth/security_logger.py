"""Security event logging for the auth audit trail.

Events go to the ``auth.security`` logger with structured ``extra``
fields so a JSON formatter or log shipper can index them. Raw session
tokens are never written; only a short SHA-256 fingerprint is.
"""

import hashlib
import logging
from enum import Enum
from typing import Any


class SecurityEvent(Enum):
    """Auth security event types."""

    SESSION_RESOLVED = "session_resolved"
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_USER_MISSING = "session_user_missing"
    STORE_FAULT = "store_fault"
    ACCESS_DENIED = "access_denied"


_LEVELS = {
    SecurityEvent.SESSION_RESOLVED: logging.DEBUG,
    SecurityEvent.SESSION_NOT_FOUND: logging.INFO,
    SecurityEvent.SESSION_USER_MISSING: logging.WARNING,
    SecurityEvent.STORE_FAULT: logging.ERROR,
    SecurityEvent.ACCESS_DENIED: logging.WARNING,
}


def token_fingerprint(token: str | None) -> str | None:
    """Short, non-reversible identifier for a token, safe to log."""
    if not token:
        return None
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


class SecurityLogger:
    """Writes auth security events to the standard logging tree."""

    LOGGER_NAME = "auth.security"

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(self.LOGGER_NAME)

    def log(
        self,
        event: SecurityEvent,
        token: str | None = None,
        user_id: int | None = None,
        details: dict[str, Any] | None = None,
        error: BaseException | None = None,
    ) -> None:
        """Log a security event.

        ``error`` attaches exception info to the record so the traceback of
        a swallowed store fault is still visible to operators.
        """
        fields = {
            "security_event": event.value,
            "token_fingerprint": token_fingerprint(token),
            "user_id": user_id,
            "details": details or {},
        }
        parts = [
            f"{key}={value}"
            for key, value in fields.items()
            if key != "details" and value is not None
        ]
        parts.extend(f"{key}={value}" for key, value in sorted(fields["details"].items()))
        self._logger.log(
            _LEVELS[event],
            " ".join(parts),
            extra=fields,
            exc_info=(type(error), error, error.__traceback__) if error is not None else None,
        )
