"""Application factory: wires config, stores, resolver and routes."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.base import success_response
from api.errors import register_error_handlers
from api.middleware import RequestContextLogFilter, RequestIDMiddleware
from clients.postgres_client import PostgresClient
from clients.valkey_client import ValkeyClient
from auth.api import create_auth_router
from auth.config import AuthConfig
from auth.database import PostgresAuthStore
from auth.file_store import JsonFileStore
from auth.resolver import SessionResolver
from auth.security_middleware import AuthMiddleware
from auth.service import AuthService
from auth.session import ValkeySessionStore
from auth.stores import MemoryStore, SessionStore, UserStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(request_id)s user=%(auth_user_id)s] %(message)s"
_HANDLER_NAME = "session-resolver"


def configure_logging(level: str = "INFO") -> None:
    """Send all records to stderr, tagged with the current request id."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestContextLogFilter())
    handler.set_name(_HANDLER_NAME)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


def build_stores(
    config: AuthConfig,
    clients: list | None = None,
) -> tuple[SessionStore, UserStore]:
    """Instantiate the configured session and user backends.

    Backends that appear on both sides share one instance. Network clients
    created along the way are appended to ``clients`` so the caller can
    close them on shutdown.
    """
    opened = clients if clients is not None else []
    shared = {}

    def backend(kind: str):
        if kind in shared:
            return shared[kind]
        if kind == "memory":
            store = MemoryStore()
        elif kind == "file":
            store = JsonFileStore(config.data_file)
        elif kind == "postgres":
            client = PostgresClient(config.database_url)
            opened.append(client)
            store = PostgresAuthStore(client)
        elif kind == "valkey":
            client = ValkeyClient(config.valkey_url)
            opened.append(client)
            store = ValkeySessionStore(client)
        else:
            raise ValueError(f"Unknown store backend: {kind}")
        shared[kind] = store
        return store

    sessions = backend(config.session_store)
    users = backend(config.user_store)
    logger.info(
        f"Auth stores ready: sessions={config.session_store} users={config.user_store}"
    )
    return sessions, users


def create_app(
    config: AuthConfig | None = None,
    resolver: SessionResolver | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Pass a resolver to bypass store construction (tests, embedding).
    """
    config = config or AuthConfig()
    clients = []
    if resolver is None:
        sessions, users = build_stores(config, clients)
        resolver = SessionResolver(sessions, users)
    auth_service = AuthService(resolver)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        for client in clients:
            try:
                client.close()
            except Exception as e:
                logger.warning(f"Error closing {type(client).__name__}: {e}")

    app = FastAPI(title="Session resolver", lifespan=lifespan)
    app.state.config = config
    app.state.auth_service = auth_service

    # Added last runs first: request id must be set before auth logs anything
    app.add_middleware(
        AuthMiddleware,
        auth_service=auth_service,
        cookie_name=config.session_cookie_name,
    )
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(
        create_auth_router(resolver, cookie_name=config.session_cookie_name),
        prefix="/auth",
    )

    @app.get("/health")
    async def health():
        return success_response({"status": "ok"})

    return app


def create_app_from_env() -> FastAPI:
    """Entry point for ASGI servers: ``uvicorn app:create_app_from_env --factory``."""
    config = AuthConfig()
    configure_logging(config.log_level)
    return create_app(config)
