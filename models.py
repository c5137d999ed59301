"""
Planmoni - Database Schema
==========================

Tables the backend reads and writes on behalf of the mobile app:
- Profiles with the cached KYC tier
- Naira wallets (available and locked balances)
- Payout plans and their custom payout dates
- Identity (BVN/NIN) and document verification records
- Transaction ledger and in-app notification events
- Bearer sessions for API authentication
"""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlalchemy import (
    Integer, String, Numeric, DateTime, Boolean, Text,
    ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column

from utils.datetime_helpers import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# ============================================================================
# ENUMS - Business Logic Constants
# ============================================================================

class PayoutPlanStatus(Enum):
    """Payout plan lifecycle states"""
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    PAYOUT = "payout"


class TransactionStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class EventType(Enum):
    """In-app notification categories"""
    PAYOUT_COMPLETED = "payout_completed"
    DISBURSEMENT_FAILED = "disbursement_failed"
    PLAN_CREATED = "plan_created"
    EMERGENCY_WITHDRAWAL = "emergency_withdrawal"


class DocumentType(Enum):
    PASSPORT = "passport"
    DRIVERS_LICENSE = "drivers_license"
    NATIONAL_ID = "national_id"


# ============================================================================
# MODELS
# ============================================================================

class Profile(Base):
    """User profile; kyc_tier is a display cache of the resolved tier"""
    __tablename__ = 'profiles'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    kyc_tier: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, onupdate=utcnow, nullable=False)

    wallet: Mapped[Optional["Wallet"]] = relationship("Wallet", back_populates="user", uselist=False)
    payout_plans: Mapped[list["PayoutPlan"]] = relationship("PayoutPlan", back_populates="user")

    __table_args__ = (
        CheckConstraint('kyc_tier BETWEEN 1 AND 3', name='ck_profile_kyc_tier_range'),
    )


class Wallet(Base):
    """Naira wallet; locked_balance holds funds committed to payout plans"""
    __tablename__ = 'wallets'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False, unique=True)
    balance: Mapped[Decimal] = mapped_column(Numeric(20, 2), default=Decimal("0"), nullable=False)
    locked_balance: Mapped[Decimal] = mapped_column(Numeric(20, 2), default=Decimal("0"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, onupdate=utcnow, nullable=False)

    user: Mapped["Profile"] = relationship("Profile", back_populates="wallet")

    __table_args__ = (
        CheckConstraint('balance >= 0', name='ck_wallet_balance_positive'),
        CheckConstraint('locked_balance >= 0', name='ck_wallet_locked_positive'),
    )


class PayoutPlan(Base):
    """Scheduled disbursement of locked funds"""
    __tablename__ = 'payout_plans'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    total_amount: Mapped[Decimal] = mapped_column(Numeric(20, 2), nullable=False)
    payout_amount: Mapped[Decimal] = mapped_column(Numeric(20, 2), nullable=False)
    frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # Number of scheduled payouts
    completed_payouts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    status: Mapped[str] = mapped_column(String(20), default=PayoutPlanStatus.ACTIVE.value, nullable=False)
    emergency_withdrawal_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    next_payout_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=False), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, onupdate=utcnow, nullable=False)

    user: Mapped["Profile"] = relationship("Profile", back_populates="payout_plans")
    custom_dates: Mapped[list["CustomPayoutDate"]] = relationship(
        "CustomPayoutDate", back_populates="plan", cascade="all, delete-orphan",
        order_by="CustomPayoutDate.payout_date",
    )

    __table_args__ = (
        CheckConstraint('total_amount >= 0', name='ck_payout_plan_total_positive'),
        CheckConstraint('payout_amount > 0', name='ck_payout_plan_payout_positive'),
        CheckConstraint('completed_payouts >= 0', name='ck_payout_plan_completed_positive'),
        CheckConstraint(
            f"status IN ('{PayoutPlanStatus.ACTIVE.value}', '{PayoutPlanStatus.PAUSED.value}', "
            f"'{PayoutPlanStatus.COMPLETED.value}', '{PayoutPlanStatus.CANCELLED.value}')",
            name='ck_payout_plan_status_valid',
        ),
        Index('ix_payout_plans_user_status', 'user_id', 'status'),
    )


class CustomPayoutDate(Base):
    """Payout dates of plans with a custom frequency"""
    __tablename__ = 'custom_payout_dates'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    payout_plan_id: Mapped[str] = mapped_column(String(36), ForeignKey('payout_plans.id'), nullable=False, index=True)
    payout_date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    plan: Mapped["PayoutPlan"] = relationship("PayoutPlan", back_populates="custom_dates")


class KycVerification(Base):
    """Identity (BVN/NIN) verification attempts"""
    __tablename__ = 'kyc_verifications'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    verification_type: Mapped[str] = mapped_column(String(10), default="bvn", nullable=False)  # bvn, nin
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    provider_reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_kyc_verifications_user_created', 'user_id', 'created_at'),
    )


class KycDocument(Base):
    """Document verification attempts"""
    __tablename__ = 'kyc_documents'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    document_type: Mapped[str] = mapped_column(String(20), default=DocumentType.NATIONAL_ID.value, nullable=False)
    document_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_kyc_documents_user_created', 'user_id', 'created_at'),
    )


class Transaction(Base):
    """Financial transaction ledger"""
    __tablename__ = 'transactions'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(20, 2), nullable=False)
    fee: Mapped[Decimal] = mapped_column(Numeric(20, 2), default=Decimal("0"), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=TransactionStatus.PENDING.value, nullable=False)

    source: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    destination: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payout_plan_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey('payout_plans.id'), nullable=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reference: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint('amount >= 0', name='ck_transaction_amount_positive'),
        Index('ix_transactions_user_type', 'user_id', 'type'),
    )


class Event(Base):
    """In-app notification shown in the activity feed"""
    __tablename__ = 'events'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(40), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="unread", nullable=False)
    payout_plan_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey('payout_plans.id'), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, nullable=False)


class UserSession(Base):
    """Bearer tokens issued to the mobile app"""
    __tablename__ = 'user_sessions'

    session_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), default='active', nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    __table_args__ = (
        Index('ix_user_sessions_expires', 'expires_at'),
    )
