"""Tests for MemoryStore - in-process session and user backend."""

from datetime import timedelta

from auth.stores import MemoryStore


class TestMemoryStore:

    def test_empty_store(self):
        store = MemoryStore()

        assert store.find_valid_session("abc") is None
        assert store.find_user_by_id(42) is None

    def test_finds_added_records(self, user_factory, session_factory):
        store = MemoryStore()
        store.add_user(user_factory())
        store.add_session(session_factory())

        assert store.find_valid_session("abc").user_id == 42
        assert store.find_user_by_id(42).name == "Ana"

    def test_expired_session_hidden(self, session_factory):
        store = MemoryStore(sessions=[session_factory(expires_in=timedelta(0))])

        assert store.find_valid_session("abc") is None

    def test_remove_user(self, user_factory):
        store = MemoryStore(users=[user_factory()])

        store.remove_user(42)
        store.remove_user(42)

        assert store.find_user_by_id(42) is None
