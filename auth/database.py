"""Database operations for authentication.

Uses non-RLS tables: users, sessions.
These tables are read during auth before user context is established.
Column names follow the portal's schema (nome, telefone).
"""

from typing import Any

import psycopg2

from clients.postgres_client import PostgresClient
from auth.exceptions import StoreError
from auth.types import Session, User
from utils.timezone import now_utc


class PostgresAuthStore:
    """Session and user lookups against PostgreSQL."""

    def __init__(self, postgres: PostgresClient):
        self._db = postgres

    def _single(self, query: str, params: tuple) -> dict[str, Any] | None:
        try:
            return self._db.execute_single(query, params)
        except psycopg2.Error as e:
            raise StoreError(f"Auth database query failed: {e}") from e

    def find_valid_session(self, token: str) -> Session | None:
        """Find an unexpired session by token."""
        row = self._single(
            """SELECT token, user_id, created_at, expires_at
               FROM sessions
               WHERE token = %s AND expires_at > %s""",
            (token, now_utc()),
        )
        if row is None:
            return None
        return Session(
            token=row["token"],
            user_id=row["user_id"],
            created_at=row["created_at"],
            expires_at=row["expires_at"],
        )

    def find_user_by_id(self, user_id: int) -> User | None:
        """Find user by ID."""
        row = self._single(
            """SELECT id, nome, email, telefone, password_hash, role, created_at
               FROM users WHERE id = %s""",
            (user_id,),
        )
        if row is None:
            return None
        return User(
            id=row["id"],
            name=row["nome"],
            email=row["email"],
            phone=row["telefone"],
            password_hash=row["password_hash"],
            role=row["role"],
            created_at=row["created_at"],
        )
