"""Payout plan progress figures for display"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from utils.decimal_precision import AmountLike, MonetaryDecimal
from utils.exception_handler import InvalidPlan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanProgress:
    progress_percent: int
    amount_disbursed: Decimal
    remaining_amount: Decimal
    remaining_payouts: int

    def to_dict(self) -> dict:
        return {
            "progress_percent": self.progress_percent,
            "amount_disbursed": str(self.amount_disbursed),
            "remaining_amount": str(self.remaining_amount),
            "remaining_payouts": self.remaining_payouts,
        }


def progress(
    completed_payouts: int,
    duration: int,
    payout_amount: AmountLike,
    total_amount: AmountLike,
) -> PlanProgress:
    """
    Compute progress metrics for a payout plan.

    Args:
        completed_payouts: Payouts already disbursed
        duration: Total number of scheduled payouts
        payout_amount: Naira disbursed per payout
        total_amount: Naira locked into the plan

    Raises:
        InvalidPlan: duration is not positive or completed_payouts is negative
        InvalidAmount: an amount is not a non-negative number

    Inconsistent upstream data (more completed payouts than scheduled) is
    passed through, giving a percentage above 100.
    """
    if duration <= 0:
        raise InvalidPlan(f"Plan duration must be positive, got {duration}")
    if completed_payouts < 0:
        raise InvalidPlan(f"Completed payouts cannot be negative, got {completed_payouts}")

    if completed_payouts > duration:
        logger.warning(
            f"Plan reports {completed_payouts} completed payouts for a duration of {duration}"
        )

    per_payout = MonetaryDecimal.parse_amount(payout_amount, "payout_amount")
    total = MonetaryDecimal.parse_amount(total_amount, "total_amount")

    percent = MonetaryDecimal.round_percent(
        Decimal(100) * Decimal(completed_payouts) / Decimal(duration)
    )
    disbursed = per_payout * completed_payouts

    return PlanProgress(
        progress_percent=percent,
        amount_disbursed=disbursed,
        remaining_amount=total - disbursed,
        remaining_payouts=max(duration - completed_payouts, 0),
    )
