"""Emergency withdrawal fee calculation for payout plans"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Union

from utils.decimal_precision import AmountLike, MonetaryDecimal
from utils.fee_schedule import WithdrawalTier, parse_tier, rate_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WithdrawalQuote:
    """What the user receives for an early withdrawal at a given tier.

    Derived on demand and never stored; only the executed withdrawal is
    persisted. fee_amount + net_amount == principal always holds.
    """

    principal: Decimal
    tier: WithdrawalTier
    fee_rate: Decimal
    fee_amount: Decimal
    net_amount: Decimal

    def to_dict(self) -> Dict[str, str]:
        """Serialize with amounts as strings to keep Decimal precision"""
        return {
            "principal": str(self.principal),
            "option": self.tier.value,
            "fee_rate": str(self.fee_rate),
            "fee_amount": str(self.fee_amount),
            "net_amount": str(self.net_amount),
        }


class FeeCalculator:
    """Handles emergency withdrawal fee calculations with mathematical precision"""

    @classmethod
    def quote(
        cls, principal: AmountLike, tier: Union[WithdrawalTier, str]
    ) -> WithdrawalQuote:
        """
        Quote an emergency withdrawal.

        Args:
            principal: Amount to withdraw from the plan, in Naira
            tier: WithdrawalTier or wire code ('instant', '24h', '72h')

        Returns:
            WithdrawalQuote with fee rounded half-up to the kobo

        Raises:
            InvalidAmount: principal is not a non-negative finite number
            InvalidWithdrawalTier: tier is not one of the three options
        """
        amount = MonetaryDecimal.quantize_ngn(
            MonetaryDecimal.parse_amount(principal, "withdrawal_principal")
        )
        withdrawal_tier = parse_tier(tier)
        fee_rate = rate_for(withdrawal_tier)

        fee_amount = MonetaryDecimal.multiply_precise(amount, fee_rate)
        net_amount = MonetaryDecimal.subtract_precise(amount, fee_amount)

        logger.debug(
            f"Emergency withdrawal quote: {amount} at {withdrawal_tier.value} "
            f"-> fee {fee_amount}, net {net_amount}"
        )
        return WithdrawalQuote(
            principal=amount,
            tier=withdrawal_tier,
            fee_rate=fee_rate,
            fee_amount=fee_amount,
            net_amount=net_amount,
        )

    @classmethod
    def quote_all(cls, principal: AmountLike) -> List[WithdrawalQuote]:
        """Quotes for every tier, fastest first"""
        return [cls.quote(principal, tier) for tier in WithdrawalTier]


def quote(principal: AmountLike, tier: Union[WithdrawalTier, str]) -> WithdrawalQuote:
    """Convenience function for direct fee calculation"""
    return FeeCalculator.quote(principal, tier)


def quote_all(principal: AmountLike) -> List[WithdrawalQuote]:
    """Convenience function for the option selection screen"""
    return FeeCalculator.quote_all(principal)
