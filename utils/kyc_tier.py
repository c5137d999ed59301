"""
KYC Tier Resolution
===================

A user's verification tier comes from two independent checks: the latest
identity (BVN/NIN) verification and the latest document verification.

- Tier 1: identity not verified (or never attempted)
- Tier 2: identity verified, document not verified
- Tier 3: both verified

The tier cached on the profile is only a display copy; this module is the
authority.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from utils.decimal_precision import AmountLike, MonetaryDecimal
from utils.exception_handler import TransactionLimitExceeded

logger = logging.getLogger(__name__)


class VerificationStatus(Enum):
    """Status reported by the identity verification provider"""
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"

    @classmethod
    def from_value(cls, value: Union["VerificationStatus", str, None]) -> "VerificationStatus":
        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        if normalized == "rejected":
            return cls.FAILED
        try:
            return cls(normalized)
        except ValueError:
            logger.warning(f"Unknown verification status {value!r}, treating as pending")
            return cls.PENDING


class KycTier(IntEnum):
    BASIC = 1
    INTERMEDIATE = 2
    FULL = 3


class OverallVerificationStatus(Enum):
    UNVERIFIED = "unverified"
    PARTIALLY_VERIFIED = "partially_verified"
    FULLY_VERIFIED = "fully_verified"


@dataclass(frozen=True)
class VerificationRecord:
    """Snapshot of one identity or document verification attempt"""

    status: VerificationStatus
    created_at: datetime
    record_id: Optional[str] = None

    @property
    def is_verified(self) -> bool:
        return self.status is VerificationStatus.VERIFIED

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "id": self.record_id,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }


def latest_record(records: Iterable[VerificationRecord]) -> Optional[VerificationRecord]:
    """Most recently created record, or None when there are none"""
    return max(records, key=lambda record: record.created_at, default=None)


def _verified(record: Optional[VerificationRecord]) -> bool:
    return record is not None and record.is_verified


def resolve_tier(
    latest_identity: Optional[VerificationRecord],
    latest_document: Optional[VerificationRecord],
) -> KycTier:
    """Verification tier from the latest identity and document records.

    Absent records mean "not attempted yet" and are not errors. The document
    record only counts once identity is verified.
    """
    identity_ok = _verified(latest_identity)
    document_ok = identity_ok and _verified(latest_document)
    return KycTier(1 + int(identity_ok) + int(document_ok))


_OVERALL_BY_TIER = {
    KycTier.BASIC: OverallVerificationStatus.UNVERIFIED,
    KycTier.INTERMEDIATE: OverallVerificationStatus.PARTIALLY_VERIFIED,
    KycTier.FULL: OverallVerificationStatus.FULLY_VERIFIED,
}


def resolve_verification(
    latest_identity: Optional[VerificationRecord],
    latest_document: Optional[VerificationRecord],
) -> Tuple[KycTier, OverallVerificationStatus]:
    """Tier together with the overall status label shown in the app"""
    tier = resolve_tier(latest_identity, latest_document)
    return tier, _OVERALL_BY_TIER[tier]


# ============================================================================
# Transaction limits per tier (NGN)
# ============================================================================

class TierLimits(NamedTuple):
    deposit: Optional[Decimal]  # None = unlimited
    single_payout: Decimal
    daily_payout: Decimal


TIER_LIMITS: Dict[KycTier, TierLimits] = {
    KycTier.BASIC: TierLimits(Decimal("500000"), Decimal("100000"), Decimal("200000")),
    KycTier.INTERMEDIATE: TierLimits(Decimal("2000000"), Decimal("1000000"), Decimal("5000000")),
    KycTier.FULL: TierLimits(None, Decimal("10000000"), Decimal("50000000")),
}

LIMIT_KINDS = TierLimits._fields


def limits_for(tier: Union[KycTier, int]) -> TierLimits:
    return TIER_LIMITS[KycTier(tier)]


def upgrade_options(tier: Union[KycTier, int]) -> List[Tuple[KycTier, TierLimits]]:
    """Higher tiers the user can still unlock, lowest first"""
    current = KycTier(tier)
    return [(level, limits) for level, limits in TIER_LIMITS.items() if level > current]


def check_limit(tier: Union[KycTier, int], kind: str, amount: AmountLike) -> Decimal:
    """Validate an amount against the tier limit and return it as Decimal"""
    if kind not in LIMIT_KINDS:
        raise ValueError(f"Unknown limit kind {kind!r}, expected one of {LIMIT_KINDS}")

    value = MonetaryDecimal.parse_amount(amount, kind)
    limit = getattr(limits_for(tier), kind)
    if limit is not None and value > limit:
        logger.info(f"Tier {int(tier)} {kind} limit hit: {value} > {limit}")
        raise TransactionLimitExceeded(int(tier), kind, value, limit)
    return value


def limits_to_dict(limits: TierLimits) -> Dict[str, Optional[str]]:
    return {
        kind: (str(value) if value is not None else None)
        for kind, value in limits._asdict().items()
    }
