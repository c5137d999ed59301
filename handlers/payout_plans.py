"""
Payout Plan API
Progress figures for the plan detail screen
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from handlers.dependencies import get_current_user_id, get_db_session
from services.payout_plan_service import get_plan, plan_progress
from utils.exception_handler import InvalidPlan, PlanNotFound
from utils.payout_schedule import format_frequency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payout-plans", tags=["payout-plans"])


@router.get("/{plan_id}/progress")
def get_payout_plan_progress(
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
):
    try:
        plan = get_plan(session, plan_id, user_id)
        figures = plan_progress(plan)
    except PlanNotFound:
        raise HTTPException(status_code=404, detail="Payout plan not found")
    except InvalidPlan as e:
        logger.warning(f"Plan {plan_id} has inconsistent counters: {e}")
        raise HTTPException(status_code=400, detail=e.message)

    return {
        "planId": plan.id,
        "name": plan.name,
        "status": plan.status,
        "frequency": format_frequency(plan.frequency),
        "completed_payouts": plan.completed_payouts,
        "duration": plan.duration,
        "total_amount": str(plan.total_amount),
        "next_payout_date": plan.next_payout_date.isoformat() if plan.next_payout_date else None,
        **figures.to_dict(),
    }
