"""
Shared fixtures for the Planmoni test suite.

Every test gets its own in-memory SQLite database; nothing talks to the
network or to the configured DATABASE_URL.
"""

import logging
from datetime import datetime
from decimal import Decimal

import pytest

from database import create_session_factory, init_db
from models import Profile, Wallet
from services.payout_plan_service import create_payout_plan

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def pytest_configure(config):
    """Configure pytest with custom marks"""
    config.addinivalue_line("markers", "unit: Pure calculation tests")
    config.addinivalue_line("markers", "integration: Tests that use the database")
    config.addinivalue_line("markers", "api: API endpoint tests")


@pytest.fixture
def session_factory():
    factory = create_session_factory("sqlite:///:memory:")
    engine = factory.kw["bind"]
    init_db(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def make_user(db_session):
    """Create a profile with a wallet holding `balance` Naira"""
    def _make_user(balance="1000000", email=None):
        profile = Profile(email=email, first_name="Ada", last_name="Okafor")
        db_session.add(profile)
        db_session.flush()
        db_session.add(Wallet(user_id=profile.id, balance=Decimal(balance), locked_balance=Decimal("0")))
        db_session.flush()
        return profile
    return _make_user


@pytest.fixture
def make_plan(db_session):
    """Create a monthly plan of `duration` x `payout_amount` for `user`"""
    def _make_plan(user, total_amount="500000", payout_amount="50000", duration=10, **kwargs):
        kwargs.setdefault("frequency", "monthly")
        kwargs.setdefault("start_date", datetime(2024, 1, 15, 9, 0))
        return create_payout_plan(
            db_session,
            user_id=user.id,
            name=kwargs.pop("name", "Salary Plan"),
            total_amount=total_amount,
            payout_amount=payout_amount,
            duration=duration,
            **kwargs,
        )
    return _make_plan
