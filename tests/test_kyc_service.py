"""
Tests for KYC tier refresh against stored verification records
"""

from datetime import datetime, timedelta

import pytest

from models import KycDocument, KycVerification
from services.kyc_service import get_latest_identity_record, refresh_kyc_tier
from utils.kyc_tier import VerificationStatus

pytestmark = pytest.mark.integration

TODAY = datetime(2024, 6, 10, 8, 0)
YESTERDAY = TODAY - timedelta(days=1)


def add_identity(session, user, status, created_at):
    session.add(KycVerification(user_id=user.id, verification_type="bvn", status=status, created_at=created_at))
    session.flush()


def add_document(session, user, status, created_at):
    session.add(KycDocument(user_id=user.id, status=status, created_at=created_at))
    session.flush()


class TestRefreshKycTier:

    def test_no_records(self, db_session, make_user):
        user = make_user()
        result = refresh_kyc_tier(db_session, user.id)

        assert result["status"] == "success"
        assert result["tier"] == 1
        assert result["overall_status"] == "unverified"
        assert result["verification"] is None
        assert result["document"] is None
        assert result["limits"]["single_payout"] == "100000"

    def test_identity_yesterday_document_pending_today(self, db_session, make_user):
        user = make_user()
        add_identity(db_session, user, "verified", YESTERDAY)
        add_document(db_session, user, "pending", TODAY)

        result = refresh_kyc_tier(db_session, user.id)

        assert result["tier"] == 2
        assert result["overall_status"] == "partially_verified"
        assert result["document"]["status"] == "pending"
        assert user.kyc_tier == 2

    def test_latest_identity_record_wins(self, db_session, make_user):
        user = make_user()
        add_identity(db_session, user, "verified", YESTERDAY)
        add_identity(db_session, user, "failed", TODAY)
        add_document(db_session, user, "verified", TODAY)

        latest = get_latest_identity_record(db_session, user.id)
        assert latest.status is VerificationStatus.FAILED
        assert refresh_kyc_tier(db_session, user.id)["tier"] == 1

    def test_fully_verified(self, db_session, make_user):
        user = make_user()
        add_identity(db_session, user, "verified", YESTERDAY)
        add_document(db_session, user, "verified", TODAY)

        result = refresh_kyc_tier(db_session, user.id)

        assert result["tier"] == 3
        assert result["limits"]["deposit"] is None
        assert user.kyc_tier == 3

    def test_tier_can_drop(self, db_session, make_user):
        user = make_user()
        user.kyc_tier = 3
        add_identity(db_session, user, "rejected", TODAY)

        assert refresh_kyc_tier(db_session, user.id)["tier"] == 1
        assert user.kyc_tier == 1

    def test_records_of_other_users_are_ignored(self, db_session, make_user):
        user, other = make_user(), make_user()
        add_identity(db_session, other, "verified", TODAY)

        assert refresh_kyc_tier(db_session, user.id)["tier"] == 1

    def test_missing_profile(self, db_session, caplog):
        result = refresh_kyc_tier(db_session, "no-such-user")
        assert result["tier"] == 1
        assert "without a profile row" in caplog.text
