"""Flat-file JSON database backend.

Reads the portal's ``db.json`` layout::

    {"users": [...], "sessions": [...], "ocorrencias": [...], "counters": {...}}

Only ``users`` and ``sessions`` are consulted. The file is re-read on
every lookup so writes made by other processes are picked up; nothing is
ever written back.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from auth.exceptions import StoreError
from auth.types import Session, User
from utils.timezone import now_utc, parse_iso

logger = logging.getLogger(__name__)


class JsonFileStore:
    """Session and user store over a single JSON file."""

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        """Load the whole database.

        A missing file is an empty database.

        Raises:
            StoreError: file unreadable or not a JSON object.
        """
        with self._lock:
            try:
                raw = self._path.read_text(encoding="utf-8")
            except FileNotFoundError:
                logger.debug(f"Database file {self._path} not found, treating as empty")
                return {"users": [], "sessions": []}
            except OSError as e:
                raise StoreError(f"Cannot read {self._path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupt JSON in {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"Expected a JSON object in {self._path}")
        return data

    def _records(self, data: dict[str, Any], table: str) -> list[dict[str, Any]]:
        records = data.get(table, [])
        if not isinstance(records, list):
            raise StoreError(f"'{table}' in {self._path} is not a list")
        return records

    def find_valid_session(self, token: str) -> Session | None:
        """Session with this token whose expiry is still in the future."""
        now = now_utc()
        for record in self._records(self._read(), "sessions"):
            if not isinstance(record, dict) or record.get("token") != token:
                continue
            try:
                session = Session(
                    token=record["token"],
                    user_id=record["user_id"],
                    created_at=parse_iso(record["created_at"]),
                    expires_at=parse_iso(record["expires_at"]),
                )
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                raise StoreError(f"Malformed session record in {self._path}: {e}") from e
            if session.expires_at > now:
                return session
        return None

    def find_user_by_id(self, user_id: int) -> User | None:
        for record in self._records(self._read(), "users"):
            if not isinstance(record, dict) or record.get("id") != user_id:
                continue
            try:
                return User.model_validate(record)
            except ValidationError as e:
                raise StoreError(f"Malformed user record {user_id} in {self._path}: {e}") from e
        return None
