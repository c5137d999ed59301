"""
Tests for bearer session issue and lookup
"""

from datetime import timedelta

import pytest

from models import UserSession
from services.session_service import issue_session, resolve_session
from utils.datetime_helpers import utcnow
from utils.exception_handler import AuthenticationError

pytestmark = pytest.mark.integration


class TestSessions:

    def test_issue_and_resolve(self, db_session, make_user):
        user = make_user()
        token = issue_session(db_session, user.id)

        assert resolve_session(db_session, f"Bearer {token}") == user.id

    @pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer unknown-token"])
    def test_rejected_headers(self, db_session, header):
        with pytest.raises(AuthenticationError):
            resolve_session(db_session, header)

    def test_expired_session(self, db_session, make_user):
        user = make_user()
        token = issue_session(db_session, user.id, ttl_hours=1)
        db_session.get(UserSession, token).expires_at = utcnow() - timedelta(minutes=1)

        with pytest.raises(AuthenticationError):
            resolve_session(db_session, f"Bearer {token}")

    def test_revoked_session(self, db_session, make_user):
        user = make_user()
        token = issue_session(db_session, user.id)
        db_session.get(UserSession, token).status = "revoked"

        with pytest.raises(AuthenticationError):
            resolve_session(db_session, f"Bearer {token}")
