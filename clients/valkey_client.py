"""
Valkey (Redis-compatible) client used by the session store.

Thin wrapper around redis-py exposing only reads. Session values are
written by the login flow, never by this service.
Connection problems surface as redis.RedisError; there is no fallback.
"""

import json
import logging
from typing import Any

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Read-only Valkey client.

    Usage:
        client = ValkeyClient("redis://localhost:6379/0")
        data = client.get_json("session:abc")  # None if the key is absent
    """

    def __init__(self, url: str):
        """
        Connect and verify the server answers.

        Raises:
            redis.ConnectionError: server unreachable
        """
        self._client = redis.from_url(url, decode_responses=True)
        self._client.ping()
        logger.info("ValkeyClient connected")

    def get_json(self, key: str) -> Any:
        """
        Decoded JSON value, or None when the key is absent.

        Raises ValueError if the stored value is not JSON.
        """
        raw = self._client.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in key '{key}': {e}") from e

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
        logger.info("ValkeyClient closed")
