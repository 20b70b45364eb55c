"""Shared test fixtures for the session resolver test suite."""

import json
import os
from datetime import timedelta

import pytest

from auth.resolver import SessionResolver
from auth.service import AuthService
from auth.stores import MemoryStore
from auth.types import Session, User
from utils.timezone import now_utc
from utils.user_context import clear_current_user_id


# =============================================================================
# TEST DATA CONSTANTS
# =============================================================================

# Scenario user from the portal: a regular account with a session "abc"
ANA_ID = 42
ANA_TOKEN = "abc"

# Admin account
ADMIN_ID = 1
ADMIN_TOKEN = "admin-token"

# Session whose user was deleted
DANGLING_TOKEN = "dangling-token"
DANGLING_USER_ID = 99


def _make_user(user_id=ANA_ID, name="Ana", email="ana@x.com", phone="11999999999", role="user"):
    return User(
        id=user_id,
        name=name,
        email=email,
        phone=phone,
        password_hash="$2a$10$notarealhashbutlookslikeone",
        role=role,
        created_at=now_utc(),
    )


def _make_session(token=ANA_TOKEN, user_id=ANA_ID, expires_in=timedelta(hours=24)):
    now = now_utc()
    return Session(
        token=token,
        user_id=user_id,
        created_at=now,
        expires_at=now + expires_in,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def user_factory():
    """Build a User; keyword arguments override the scenario defaults."""
    return _make_user


@pytest.fixture
def session_factory():
    """Build a Session; keyword arguments override the scenario defaults."""
    return _make_session


# =============================================================================
# CONTEXT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_user_context():
    """Ensure clean user context before and after each test."""
    clear_current_user_id()
    yield
    clear_current_user_id()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep AUTH_* variables and a developer .env file out of AuthConfig."""
    for name in list(os.environ):
        if name.startswith("AUTH_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def ana():
    return _make_user()


@pytest.fixture
def admin():
    return _make_user(user_id=ADMIN_ID, name="Admin", email="admin@x.com", phone=None, role="admin")


@pytest.fixture
def memory_store(ana, admin):
    """MemoryStore with Ana, an admin, and one dangling session."""
    return MemoryStore(
        users=[ana, admin],
        sessions=[
            _make_session(),
            _make_session(token=ADMIN_TOKEN, user_id=ADMIN_ID),
            _make_session(token=DANGLING_TOKEN, user_id=DANGLING_USER_ID),
        ],
    )


@pytest.fixture
def resolver(memory_store):
    return SessionResolver(memory_store, memory_store)


@pytest.fixture
def auth_service(resolver):
    return AuthService(resolver)


# =============================================================================
# FILE DATABASE FIXTURES
# =============================================================================


def _iso(dt):
    """Format like JavaScript's toISOString()."""
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


@pytest.fixture
def db_file(tmp_path):
    """Write a db.json in the portal's layout and return its path."""
    now = now_utc()
    data = {
        "users": [
            {
                "id": ANA_ID,
                "nome": "Ana",
                "email": "ana@x.com",
                "telefone": "11999999999",
                "password_hash": "$2a$10$hash",
                "role": "user",
                "created_at": _iso(now),
            },
            {
                "id": ADMIN_ID,
                "nome": "Admin",
                "email": "admin@x.com",
                "telefone": None,
                "password_hash": "$2a$10$hash",
                "role": "admin",
                "created_at": _iso(now),
            },
        ],
        "sessions": [
            {
                "token": ANA_TOKEN,
                "user_id": ANA_ID,
                "created_at": _iso(now),
                "expires_at": _iso(now + timedelta(hours=24)),
            },
            {
                "token": "expired-token",
                "user_id": ANA_ID,
                "created_at": _iso(now - timedelta(hours=48)),
                "expires_at": _iso(now - timedelta(hours=24)),
            },
            {
                "token": DANGLING_TOKEN,
                "user_id": DANGLING_USER_ID,
                "created_at": _iso(now),
                "expires_at": _iso(now + timedelta(hours=24)),
            },
        ],
        "ocorrencias": [],
        "feedbacks": [],
        "counters": {"user": 2, "ocorrencia": 0, "feedback": 0},
    }
    path = tmp_path / "db.json"
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
