"""Tests for AuthService - strict guard with role and ownership rules."""

import logging
from unittest.mock import Mock

import pytest

from auth.exceptions import ForbiddenError, NotAuthenticatedError, StoreError
from auth.resolver import SessionResolver
from auth.service import AuthService
from auth.stores import MemoryStore


class TestRequireAuth:
    """require_auth() - authenticated requests."""

    def test_valid_session_returns_user_and_session(self, auth_service):
        result = auth_service.require_auth("abc")

        assert result.user.id == 42
        assert result.session.token == "abc"

    def test_returns_full_user_record(self, auth_service):
        """The guard is internal; callers get the whole User, role included."""
        result = auth_service.require_auth("abc")

        assert result.user.role == "user"

    @pytest.mark.parametrize("token", [None, "", "invalid-token", "dangling-token"])
    def test_unauthenticated_raises(self, auth_service, token):
        with pytest.raises(NotAuthenticatedError):
            auth_service.require_auth(token)

    @pytest.mark.parametrize("token", [None, "invalid-token", "dangling-token"])
    def test_allow_unauthenticated(self, auth_service, token):
        result = auth_service.require_auth(token, allow_unauthenticated=True)

        assert result.session is None
        assert result.user is None

    def test_allow_unauthenticated_still_resolves(self, auth_service):
        result = auth_service.require_auth("abc", allow_unauthenticated=True)

        assert result.user.id == 42


class TestRequireAdmin:
    """require_auth(require_admin=True)."""

    def test_regular_user_forbidden(self, auth_service):
        with pytest.raises(ForbiddenError):
            auth_service.require_auth("abc", require_admin=True)

    def test_admin_allowed(self, auth_service):
        result = auth_service.require_auth("admin-token", require_admin=True)

        assert result.user.is_admin

    def test_anonymous_is_not_authenticated_not_forbidden(self, auth_service):
        with pytest.raises(NotAuthenticatedError):
            auth_service.require_auth(None, require_admin=True)

    def test_denial_is_logged(self, auth_service, caplog):
        with caplog.at_level(logging.WARNING, logger="auth.security"):
            with pytest.raises(ForbiddenError):
                auth_service.require_auth("abc", require_admin=True)

        events = [r.security_event for r in caplog.records if r.name == "auth.security"]
        assert events == ["access_denied"]


class TestStoreFaults:
    """The guard fails closed."""

    def test_store_fault_raises(self):
        sessions = Mock()
        sessions.find_valid_session.side_effect = OSError("disk gone")
        service = AuthService(SessionResolver(sessions, MemoryStore()))

        with pytest.raises(StoreError) as exc_info:
            service.require_auth("abc")

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_store_fault_not_hidden_by_allow_unauthenticated(self):
        sessions = Mock()
        sessions.find_valid_session.side_effect = StoreError("corrupt")
        service = AuthService(SessionResolver(sessions, MemoryStore()))

        with pytest.raises(StoreError):
            service.require_auth("abc", allow_unauthenticated=True)


class TestEnsureUserAccess:
    """ensure_user_access() - owner or admin."""

    def test_owner_allowed(self, auth_service, ana):
        auth_service.ensure_user_access(42, ana)

    def test_other_user_forbidden(self, auth_service, ana):
        with pytest.raises(ForbiddenError):
            auth_service.ensure_user_access(7, ana)

    def test_admin_allowed_for_anyone(self, auth_service, admin):
        auth_service.ensure_user_access(42, admin)
        auth_service.ensure_user_access(7, admin)
