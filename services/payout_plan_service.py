"""
Payout Plan Service
Creates payout plans, records disbursements and reports progress
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import (
    CustomPayoutDate, Event, EventType, PayoutPlan, PayoutPlanStatus,
    Transaction, TransactionStatus, TransactionType, Wallet,
)
from utils.datetime_helpers import ensure_naive_datetime, utcnow
from utils.decimal_precision import AmountLike, MonetaryDecimal
from utils.exception_handler import InsufficientBalance, InvalidPlan, PlanNotFound
from utils.helpers import generate_reference
from utils.payout_schedule import PayoutFrequency, next_payout_date
from utils.plan_progress import PlanProgress, progress

logger = logging.getLogger(__name__)


def get_wallet(session: Session, user_id: str) -> Wallet:
    """Fetch the user's wallet, locked for update where the backend supports it"""
    session.flush()
    stmt = (
        select(Wallet)
        .where(Wallet.user_id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    wallet = session.execute(stmt).scalars().first()
    if wallet is None:
        raise InsufficientBalance(f"No wallet found for user {user_id}")
    return wallet


def get_plan(
    session: Session, plan_id: str, user_id: Optional[str] = None, for_update: bool = False
) -> PayoutPlan:
    """Fetch a plan, optionally scoped to its owner.

    Callers that move funds pass for_update=True so the plan row stays
    locked, and freshly read, until their transaction ends. Pending
    changes are flushed first so the re-read does not discard them. Lock
    the plan before the wallet.
    """
    stmt = select(PayoutPlan).where(PayoutPlan.id == plan_id)
    if user_id is not None:
        stmt = stmt.where(PayoutPlan.user_id == user_id)
    if for_update:
        session.flush()
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    plan = session.execute(stmt).scalars().first()
    if plan is None:
        raise PlanNotFound(plan_id)
    return plan


def plan_progress(plan: PayoutPlan) -> PlanProgress:
    return progress(
        plan.completed_payouts, plan.duration, plan.payout_amount, plan.total_amount
    )


def get_plan_progress(session: Session, plan_id: str, user_id: str) -> PlanProgress:
    return plan_progress(get_plan(session, plan_id, user_id))


def create_payout_plan(
    session: Session,
    user_id: str,
    name: str,
    total_amount: AmountLike,
    payout_amount: AmountLike,
    frequency: str,
    duration: int,
    start_date: datetime,
    description: Optional[str] = None,
    custom_dates: Optional[Iterable[datetime]] = None,
    emergency_withdrawal_enabled: bool = True,
) -> PayoutPlan:
    """
    Create a payout plan and lock its total in the user's wallet.

    Raises:
        InvalidAmount: amounts are not non-negative numbers
        InvalidPlan: zero amounts, non-positive duration, or payouts exceeding the total
        InsufficientBalance: available balance cannot cover the plan total
    """
    total = MonetaryDecimal.quantize_ngn(MonetaryDecimal.parse_amount(total_amount, "plan_total"))
    per_payout = MonetaryDecimal.quantize_ngn(MonetaryDecimal.parse_amount(payout_amount, "payout_amount"))
    plan_frequency = PayoutFrequency(frequency)

    if total == 0 or per_payout == 0:
        raise InvalidPlan("Plan and payout amounts must be greater than zero")
    if duration <= 0:
        raise InvalidPlan(f"Plan duration must be positive, got {duration}")
    if per_payout * duration > total:
        raise InvalidPlan(
            f"{duration} payouts of {per_payout} exceed the plan total of {total}"
        )

    start = ensure_naive_datetime(start_date)
    dates = sorted(ensure_naive_datetime(d) for d in (custom_dates or []))
    if plan_frequency is PayoutFrequency.CUSTOM and len(dates) != duration:
        raise InvalidPlan(f"Custom plans need {duration} payout dates, got {len(dates)}")

    wallet = get_wallet(session, user_id)
    if wallet.balance < total:
        logger.info(f"Plan creation blocked for user {user_id}: balance {wallet.balance} < {total}")
        raise InsufficientBalance("Insufficient available balance for this payout plan")

    wallet.balance -= total
    wallet.locked_balance += total

    plan = PayoutPlan(
        user_id=user_id,
        name=name,
        description=description,
        total_amount=total,
        payout_amount=per_payout,
        frequency=plan_frequency.value,
        duration=duration,
        completed_payouts=0,
        status=PayoutPlanStatus.ACTIVE.value,
        emergency_withdrawal_enabled=emergency_withdrawal_enabled,
        start_date=start,
        next_payout_date=next_payout_date(plan_frequency, start, dates),
        custom_dates=[CustomPayoutDate(payout_date=d) for d in dates],
    )
    session.add(plan)
    session.flush()

    session.add(Event(
        user_id=user_id,
        type=EventType.PLAN_CREATED.value,
        title="Payout Plan Created",
        description=f"Your payout plan '{name}' of {MonetaryDecimal.format_ngn(total)} is now active.",
        payout_plan_id=plan.id,
    ))
    session.flush()

    logger.info(
        f"Created payout plan {plan.id} for user {user_id}: "
        f"{duration} x {per_payout} {plan_frequency.value}, locked {total}"
    )
    return plan


def _advance_payout_date(plan: PayoutPlan) -> Optional[datetime]:
    if plan.completed_payouts >= plan.duration:
        return None

    frequency = PayoutFrequency(plan.frequency)
    if frequency is PayoutFrequency.CUSTOM:
        remaining = plan.custom_dates[plan.completed_payouts:]
        return remaining[0].payout_date if remaining else None

    return next_payout_date(frequency, plan.next_payout_date or utcnow())


def record_payout(session: Session, plan_id: str) -> Transaction:
    """
    Disburse one scheduled payout of an active plan.

    Moves payout_amount from the locked balance to the available balance,
    records the transaction, advances the schedule and completes the plan
    after its last payout. The last payout also carries whatever is left
    of the plan total (a total that is not a whole number of payouts, or
    one shrunk by a partial emergency withdrawal), so a completed plan
    never leaves funds locked.
    """
    plan = get_plan(session, plan_id, for_update=True)
    if plan.status != PayoutPlanStatus.ACTIVE.value:
        raise InvalidPlan(f"Plan {plan_id} is {plan.status}, payouts need an active plan")
    if plan.completed_payouts >= plan.duration:
        raise InvalidPlan(f"Plan {plan_id} has no scheduled payouts left")

    wallet = get_wallet(session, plan.user_id)
    amount = Decimal(plan.payout_amount)
    is_final = plan.completed_payouts + 1 == plan.duration
    if is_final:
        amount = plan_progress(plan).remaining_amount
        if amount != plan.payout_amount:
            logger.info(
                f"Final payout for plan {plan_id} releases {amount} (scheduled {plan.payout_amount})"
            )
    if wallet.locked_balance < amount:
        logger.error(
            f"Locked balance {wallet.locked_balance} cannot cover payout {amount} for plan {plan_id}"
        )
        raise InsufficientBalance("Locked balance cannot cover the scheduled payout")

    wallet.locked_balance -= amount
    wallet.balance += amount

    plan.completed_payouts += 1
    plan.next_payout_date = _advance_payout_date(plan)
    if is_final:
        plan.status = PayoutPlanStatus.COMPLETED.value

    transaction = Transaction(
        user_id=plan.user_id,
        type=TransactionType.PAYOUT.value,
        amount=amount,
        status=TransactionStatus.COMPLETED.value,
        source=f"Payout Plan: {plan.name}",
        destination="Wallet",
        payout_plan_id=plan.id,
        description=f"Payout {plan.completed_payouts} of {plan.duration}",
        reference=generate_reference("po"),
    )
    session.add(transaction)
    session.add(Event(
        user_id=plan.user_id,
        type=EventType.PAYOUT_COMPLETED.value,
        title="Payout Completed",
        description=f"{MonetaryDecimal.format_ngn(amount)} from '{plan.name}' has been paid to your wallet.",
        payout_plan_id=plan.id,
    ))
    session.flush()

    logger.info(
        f"Recorded payout {plan.completed_payouts}/{plan.duration} for plan {plan.id} ({plan.status})"
    )
    return transaction
