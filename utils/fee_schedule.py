"""Emergency withdrawal fee schedule"""

import logging
from decimal import Decimal
from enum import Enum
from typing import Dict, NamedTuple, Union

from utils.exception_handler import InvalidWithdrawalTier

logger = logging.getLogger(__name__)


class WithdrawalTier(Enum):
    """How soon the user wants funds released from a payout plan"""
    INSTANT = "instant"
    TWENTY_FOUR_HOUR = "24h"
    SEVENTY_TWO_HOUR = "72h"


class TierInfo(NamedTuple):
    title: str
    processing_hours: int
    description: str


# Fee rates as fractions of the withdrawn principal
EMERGENCY_WITHDRAWAL_FEE_RATES: Dict[WithdrawalTier, Decimal] = {
    WithdrawalTier.INSTANT: Decimal("0.12"),
    WithdrawalTier.TWENTY_FOUR_HOUR: Decimal("0.06"),
    WithdrawalTier.SEVENTY_TWO_HOUR: Decimal("0.00"),
}

TIER_INFO: Dict[WithdrawalTier, TierInfo] = {
    WithdrawalTier.INSTANT: TierInfo(
        "Instant Withdrawal", 0,
        "Get your funds immediately with the highest processing fee.",
    ),
    WithdrawalTier.TWENTY_FOUR_HOUR: TierInfo(
        "24-Hour Withdrawal", 24,
        "Receive your funds within 24 hours with a reduced processing fee.",
    ),
    WithdrawalTier.SEVENTY_TWO_HOUR: TierInfo(
        "72-Hour Withdrawal", 72,
        "Wait 72 hours for your funds with no processing fee.",
    ),
}


def rate_for(tier: WithdrawalTier) -> Decimal:
    """Fee rate for a withdrawal tier"""
    return EMERGENCY_WITHDRAWAL_FEE_RATES[tier]


def parse_tier(value: Union[WithdrawalTier, str]) -> WithdrawalTier:
    """Accept a WithdrawalTier or its wire code ('instant', '24h', '72h')"""
    if isinstance(value, WithdrawalTier):
        return value
    if isinstance(value, str):
        try:
            return WithdrawalTier(value.strip().lower())
        except ValueError:
            pass
    logger.warning(f"Rejected unknown withdrawal option: {value!r}")
    raise InvalidWithdrawalTier(value)


def fee_label(tier: WithdrawalTier) -> str:
    """Human readable fee, e.g. '12% processing fee'"""
    rate = rate_for(tier)
    if rate == 0:
        return "No processing fee"
    return f"{(rate * 100).normalize():f}% processing fee"
