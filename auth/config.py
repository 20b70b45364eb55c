"""Authentication configuration."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthConfig(BaseSettings):
    """
    Authentication configuration.

    Every field can be set through an AUTH_* environment variable or a
    .env file (AUTH_USER_STORE=postgres sets user_store, and so on).
    Users and sessions can live in different backends; a Valkey session
    store is typically paired with a Postgres user store.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Cookie
    session_cookie_name: str = Field(
        default="session_token",
        description="Cookie carrying the opaque session token",
        min_length=1,
    )

    # Backends
    user_store: Literal["file", "postgres", "memory"] = Field(
        default="file",
        description="Where user records are read from",
    )
    session_store: Literal["file", "postgres", "valkey", "memory"] = Field(
        default="file",
        description="Where session records are read from",
    )
    data_file: Path = Field(
        default=Path("data/db.json"),
        description="JSON database used by the file backend",
    )
    database_url: str | None = Field(
        default=None,
        description="PostgreSQL DSN for the postgres backend",
    )
    valkey_url: str | None = Field(
        default=None,
        description="Valkey/Redis URL for the valkey session backend",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        if isinstance(value, str):
            return value.upper()
        return value

    @model_validator(mode="after")
    def _check_backend_urls(self) -> "AuthConfig":
        uses_postgres = "postgres" in (self.user_store, self.session_store)
        if uses_postgres and not self.database_url:
            raise ValueError("database_url is required for the postgres backend")
        if self.session_store == "valkey" and not self.valkey_url:
            raise ValueError("valkey_url is required for the valkey session backend")
        return self
