"""
Tests for the managed session unit of work
"""

import logging

import pytest

from database import managed_session
from models import Profile

pytestmark = pytest.mark.integration


def profile_count(session_factory):
    with managed_session(session_factory) as session:
        return session.query(Profile).count()


class TestManagedSession:

    def test_commits_on_success(self, session_factory):
        with managed_session(session_factory) as session:
            session.add(Profile(email="ada@example.com"))

        assert profile_count(session_factory) == 1

    def test_unexpected_error_rolls_back_and_logs(self, session_factory, caplog):
        with pytest.raises(RuntimeError):
            with managed_session(session_factory) as session:
                session.add(Profile(email="ada@example.com"))
                session.flush()
                raise RuntimeError("disk full")

        assert profile_count(session_factory) == 0
        assert "Database session error: disk full" in caplog.text

    def test_expected_error_rolls_back_quietly(self, session_factory, caplog):
        with caplog.at_level(logging.DEBUG):
            with pytest.raises(KeyError):
                with managed_session(session_factory, expected_errors=(KeyError,)) as session:
                    session.add(Profile(email="ada@example.com"))
                    session.flush()
                    raise KeyError("plan")

        assert profile_count(session_factory) == 0
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert "Session rolled back" in caplog.text
