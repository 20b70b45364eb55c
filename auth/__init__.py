"""Authentication and authorization modules."""

from auth.exceptions import (
    AuthError,
    NotAuthenticatedError,
    ForbiddenError,
    StoreError,
)
from auth.types import (
    User,
    Session,
    UserIdentity,
    MeResponse,
    AuthResult,
)
from auth.config import AuthConfig
from auth.stores import SessionStore, UserStore, MemoryStore
from auth.file_store import JsonFileStore
from auth.database import PostgresAuthStore
from auth.session import ValkeySessionStore
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.resolver import SessionResolver, Resolution, ResolveOutcome
from auth.service import AuthService
from auth.security_middleware import AuthMiddleware
from auth.api import create_auth_router
