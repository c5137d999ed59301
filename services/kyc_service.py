"""
KYC Service
Loads the latest verification records, resolves the tier and caches it on the profile
"""

import logging
from typing import Any, Dict, Optional, Type, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import KycDocument, KycVerification, Profile
from utils.kyc_tier import (
    VerificationRecord,
    VerificationStatus,
    limits_for,
    limits_to_dict,
    resolve_verification,
)

logger = logging.getLogger(__name__)

KycRow = Union[KycVerification, KycDocument]


def _to_record(row: Optional[KycRow]) -> Optional[VerificationRecord]:
    if row is None:
        return None
    return VerificationRecord(
        status=VerificationStatus.from_value(row.status),
        created_at=row.created_at,
        record_id=row.id,
    )


def _latest_row(session: Session, model: Type[KycRow], user_id: str) -> Optional[KycRow]:
    stmt = (
        select(model)
        .where(model.user_id == user_id)
        .order_by(model.created_at.desc())
        .limit(1)
    )
    return session.execute(stmt).scalars().first()


def get_latest_identity_record(session: Session, user_id: str) -> Optional[VerificationRecord]:
    """Most recent BVN/NIN verification for the user"""
    return _to_record(_latest_row(session, KycVerification, user_id))


def get_latest_document_record(session: Session, user_id: str) -> Optional[VerificationRecord]:
    """Most recent document verification for the user"""
    return _to_record(_latest_row(session, KycDocument, user_id))


def refresh_kyc_tier(session: Session, user_id: str) -> Dict[str, Any]:
    """
    Resolve the user's KYC tier and write it back to the profile.

    The two records come from separate queries; the tier reflects whatever
    each query returned. A missing profile is logged and the resolved tier
    is still returned.
    """
    identity = get_latest_identity_record(session, user_id)
    document = get_latest_document_record(session, user_id)
    tier, overall_status = resolve_verification(identity, document)

    profile = session.get(Profile, user_id)
    if profile is None:
        logger.warning(f"KYC tier {int(tier)} resolved for user {user_id} without a profile row")
    elif profile.kyc_tier != int(tier):
        logger.info(f"KYC tier for user {user_id}: {profile.kyc_tier} -> {int(tier)}")
        profile.kyc_tier = int(tier)
        session.flush()

    return {
        "status": "success",
        "verification": identity.to_dict() if identity else None,
        "document": document.to_dict() if document else None,
        "overall_status": overall_status.value,
        "tier": int(tier),
        "limits": limits_to_dict(limits_for(tier)),
    }
