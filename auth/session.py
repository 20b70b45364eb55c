"""Valkey-backed session lookups.

Sessions live under ``session:<token>`` keys holding a JSON object with
user_id, created_at and expires_at. The key TTL normally removes expired
sessions; expires_at is still checked in case the TTL and the stored
expiry disagree. This store never writes: issuing, extending and revoking
sessions belong to the login flow.
"""

import redis

from clients.valkey_client import ValkeyClient
from auth.exceptions import StoreError
from auth.types import Session
from utils.timezone import now_utc, parse_iso


class ValkeySessionStore:
    """Read-only session store over Valkey."""

    KEY_PREFIX = "session:"

    def __init__(self, valkey: ValkeyClient):
        self._valkey = valkey

    def _key(self, token: str) -> str:
        """Generate Valkey key for session token."""
        return f"{self.KEY_PREFIX}{token}"

    def find_valid_session(self, token: str) -> Session | None:
        """Session for token, or None if absent or past its expiry.

        Raises:
            StoreError: stored value is not a well-formed session object.
        """
        try:
            data = self._valkey.get_json(self._key(token))
        except redis.RedisError as e:
            raise StoreError(f"Valkey session lookup failed: {e}") from e
        except ValueError as e:
            raise StoreError("Invalid JSON stored for session") from e

        if data is None:
            return None

        try:
            session = Session(
                token=token,
                user_id=data["user_id"],
                created_at=parse_iso(data["created_at"]),
                expires_at=parse_iso(data["expires_at"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed session value for key {self.KEY_PREFIX}***: {e}") from e

        if now_utc() >= session.expires_at:
            return None

        return session
