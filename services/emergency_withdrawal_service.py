"""
Emergency Withdrawal Service
Early release of funds locked in a payout plan, charged per the urgency tier

Flow: Validate plan -> Recompute quote -> Move funds -> Ledger entry -> Adjust plan -> Notify
Everything happens inside the caller's session so the withdrawal commits or
rolls back as one unit of work.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Union

from sqlalchemy.orm import Session

from models import (
    Event, EventType, PayoutPlan, PayoutPlanStatus,
    Transaction, TransactionStatus, TransactionType,
)
from services.payout_plan_service import get_plan, get_wallet, plan_progress
from utils.decimal_precision import AmountLike, MonetaryDecimal
from utils.datetime_helpers import utcnow
from utils.exception_handler import WithdrawalRejected
from utils.fee_calculator import FeeCalculator, WithdrawalQuote
from utils.fee_schedule import TIER_INFO, WithdrawalTier
from utils.helpers import generate_reference

logger = logging.getLogger(__name__)


def _ensure_withdrawable(plan: PayoutPlan, amount: Decimal) -> Decimal:
    """Validate the plan accepts an emergency withdrawal of amount; return the remaining amount"""
    if plan.status != PayoutPlanStatus.ACTIVE.value:
        raise WithdrawalRejected(f"Payout plan is {plan.status}")
    if not plan.emergency_withdrawal_enabled:
        raise WithdrawalRejected("Emergency withdrawal is not enabled for this plan")
    if amount <= 0:
        raise WithdrawalRejected("Withdrawal amount must be greater than zero")

    remaining = plan_progress(plan).remaining_amount
    if amount > remaining:
        raise WithdrawalRejected("Withdrawal amount exceeds remaining amount in the plan")

    # A partial withdrawal must leave at least one more full payout
    if amount < remaining:
        new_duration = (Decimal(plan.total_amount) - amount) // Decimal(plan.payout_amount)
        if new_duration <= plan.completed_payouts:
            raise WithdrawalRejected(
                "Withdraw the full remaining amount or leave enough for at least one payout"
            )
    return remaining


def quote_for_plan(
    session: Session,
    plan_id: str,
    user_id: str,
    amount: AmountLike,
    option: Union[WithdrawalTier, str],
) -> WithdrawalQuote:
    """Quote an emergency withdrawal after checking it against the plan"""
    plan = get_plan(session, plan_id, user_id)
    quote = FeeCalculator.quote(amount, option)
    _ensure_withdrawable(plan, quote.principal)
    return quote


def process_emergency_withdrawal(
    session: Session,
    user_id: str,
    plan_id: str,
    option: Union[WithdrawalTier, str],
    amount: AmountLike,
) -> Dict[str, Any]:
    """
    Execute an emergency withdrawal from a payout plan.

    Fee and net amounts are always recomputed here; values computed by the
    client are never trusted.

    Raises:
        InvalidAmount / InvalidWithdrawalTier: bad input
        PlanNotFound: plan missing or owned by someone else
        WithdrawalRejected: plan not active, feature disabled, amount too large
        InsufficientBalance: user has no wallet
    """
    quote = FeeCalculator.quote(amount, option)
    # Plan row first, then wallet: concurrent withdrawals and payouts serialise here
    plan = get_plan(session, plan_id, user_id, for_update=True)
    remaining = _ensure_withdrawable(plan, quote.principal)

    wallet = get_wallet(session, user_id)
    if wallet.locked_balance < quote.principal:
        logger.error(
            f"❌ EMERGENCY_WITHDRAWAL: locked balance {wallet.locked_balance} < {quote.principal} "
            f"for user {user_id}, plan {plan_id}"
        )
        raise WithdrawalRejected("Locked balance is lower than the withdrawal amount")

    # 1. Release the principal from locked funds, credit the net amount
    wallet.locked_balance -= quote.principal
    wallet.balance += quote.net_amount

    # 2. Ledger entry for the net amount received
    tier_title = TIER_INFO[quote.tier].title
    transaction = Transaction(
        user_id=user_id,
        type=TransactionType.WITHDRAWAL.value,
        amount=quote.net_amount,
        fee=quote.fee_amount,
        status=TransactionStatus.COMPLETED.value,
        source=f"Payout Plan: {plan.name}",
        destination="Wallet",
        payout_plan_id=plan.id,
        description=f"Emergency withdrawal ({quote.tier.value}) from payout plan",
        reference=generate_reference("ew"),
    )
    session.add(transaction)

    # 3. Full withdrawal cancels the plan; partial shrinks it
    if quote.principal >= remaining:
        plan.status = PayoutPlanStatus.CANCELLED.value
        plan.next_payout_date = None
        plan_outcome = "cancelled"
    else:
        new_total = Decimal(plan.total_amount) - quote.principal
        plan.total_amount = new_total
        plan.duration = int(new_total // Decimal(plan.payout_amount))
        plan_outcome = "adjusted"
    plan.updated_at = utcnow()

    # 4. In-app notification
    session.add(Event(
        user_id=user_id,
        type=EventType.EMERGENCY_WITHDRAWAL.value,
        title="Emergency Withdrawal Processed",
        description=(
            f"Your emergency withdrawal of {MonetaryDecimal.format_ngn(quote.net_amount)} "
            f"({tier_title}) has been processed successfully."
        ),
        payout_plan_id=plan.id,
    ))
    session.flush()

    logger.info(
        f"✅ EMERGENCY_WITHDRAWAL: user={user_id} plan={plan.id} option={quote.tier.value} "
        f"principal={quote.principal} fee={quote.fee_amount} net={quote.net_amount} plan={plan_outcome}"
    )

    return {
        "success": True,
        "message": "Emergency withdrawal processed successfully",
        "data": {
            "withdrawalAmount": str(quote.net_amount),
            "feeAmount": str(quote.fee_amount),
            "option": quote.tier.value,
            "planId": plan.id,
            "planStatus": plan.status,
            "reference": transaction.reference,
        },
    }
