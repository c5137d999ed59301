"""
Emergency Withdrawal API
Quotes and executes early withdrawals from payout plans
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from config import Config
from handlers.dependencies import get_current_user_id, get_db_session
from services.emergency_withdrawal_service import process_emergency_withdrawal, quote_for_plan
from utils.exception_handler import (
    InsufficientBalance, InvalidAmount, PlanNotFound, ValidationError, WithdrawalRejected,
)
from utils.fee_calculator import FeeCalculator
from utils.fee_schedule import TIER_INFO, WithdrawalTier, fee_label

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emergency-withdrawal", tags=["emergency-withdrawal"])


class EmergencyWithdrawalRequest(BaseModel):
    planId: str
    option: str
    amount: Union[str, int, float]
    # Sent by older app versions; the server recomputes both
    feeAmount: Optional[Union[str, int, float]] = None
    netAmount: Optional[Union[str, int, float]] = None


def _raise_for(error: Exception) -> None:
    """Translate a domain error into the HTTP error the app expects"""
    if isinstance(error, InvalidAmount):
        raise HTTPException(status_code=400, detail=InvalidAmount.USER_MESSAGE)
    if isinstance(error, ValidationError):
        raise HTTPException(status_code=400, detail=error.message)
    if isinstance(error, PlanNotFound):
        raise HTTPException(status_code=404, detail="Payout plan not found")
    if isinstance(error, (WithdrawalRejected, InsufficientBalance)):
        raise HTTPException(status_code=400, detail=error.message)
    raise error


def _ensure_feature_enabled() -> None:
    if not Config.EMERGENCY_WITHDRAWAL_ENABLED:
        raise HTTPException(status_code=503, detail="Emergency withdrawal is temporarily unavailable")


@router.get("/quote")
def get_emergency_withdrawal_quote(
    amount: str = Query(...),
    option: Optional[str] = Query(None),
    planId: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
):
    """Quote one option, or all three when no option is given"""
    _ensure_feature_enabled()
    options = [option] if option is not None else list(WithdrawalTier)
    try:
        if planId is not None:
            quotes = [quote_for_plan(session, planId, user_id, amount, o) for o in options]
        else:
            quotes = [FeeCalculator.quote(amount, o) for o in options]
    except (ValidationError, PlanNotFound, WithdrawalRejected) as e:
        _raise_for(e)

    return {
        "quotes": [
            {
                **quote.to_dict(),
                "title": TIER_INFO[quote.tier].title,
                "fee_label": fee_label(quote.tier),
                "description": TIER_INFO[quote.tier].description,
            }
            for quote in quotes
        ]
    }


@router.post("")
def post_emergency_withdrawal(
    body: EmergencyWithdrawalRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
):
    """Process an emergency withdrawal for the authenticated user"""
    _ensure_feature_enabled()
    if body.feeAmount is not None or body.netAmount is not None:
        logger.debug(f"Ignoring client supplied fee/net amounts for plan {body.planId}")

    try:
        return process_emergency_withdrawal(
            session, user_id=user_id, plan_id=body.planId, option=body.option, amount=body.amount
        )
    except (ValidationError, PlanNotFound, WithdrawalRejected, InsufficientBalance) as e:
        logger.info(f"Emergency withdrawal rejected for user {user_id}, plan {body.planId}: {e}")
        _raise_for(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ EMERGENCY_WITHDRAWAL: Unexpected error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error during emergency withdrawal")
