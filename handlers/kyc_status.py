"""
KYC Status API
Resolves the caller's verification tier and reports their transaction limits
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from handlers.dependencies import get_current_user_id, get_db_session
from services.kyc_service import refresh_kyc_tier
from utils.kyc_tier import limits_to_dict, upgrade_options

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/kyc", tags=["kyc"])


@router.get("/status")
def get_kyc_status(
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
):
    try:
        result = refresh_kyc_tier(session, user_id)
    except Exception as e:
        logger.error(f"❌ KYC_STATUS: failed for user {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch verification status")

    result["upgrades"] = [
        {"tier": int(tier), "limits": limits_to_dict(limits)}
        for tier, limits in upgrade_options(result["tier"])
    ]
    return result
