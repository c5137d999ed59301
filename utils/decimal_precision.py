#!/usr/bin/env python3
"""
Decimal Precision Utilities for Financial Calculations
Enforces consistent Decimal usage across all Naira amounts
"""

import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext, localcontext
from typing import Union

from utils.exception_handler import InvalidAmount

logger = logging.getLogger(__name__)

# Set global decimal precision for financial calculations
getcontext().prec = 28

AmountLike = Union[str, int, float, Decimal]

# Currency symbols, codes, thousands separators and whitespace the app may send
_AMOUNT_NOISE = re.compile(r"[₦,\s]|NGN", re.IGNORECASE)


class MonetaryDecimal:
    """Enforces Decimal-only monetary operations with proper precision"""

    NGN_PRECISION = Decimal("0.01")  # 2 decimal places (kobo)
    PERCENT_PRECISION = Decimal("1")  # whole percentages for progress bars

    @classmethod
    def parse_amount(cls, value: AmountLike, context: str = "amount") -> Decimal:
        """Strictly convert a user supplied amount to a non-negative Decimal.

        Strings may carry a Naira sign and thousands separators ("₦500,000").
        Anything that is not a finite, non-negative number raises InvalidAmount;
        nothing is ever coerced to zero.
        """
        if value is None or isinstance(value, bool):
            raise InvalidAmount(value, "missing or not numeric")

        if isinstance(value, Decimal):
            decimal_value = value
        elif isinstance(value, (int, float)):
            # Convert to string first to avoid float precision issues
            decimal_value = cls._from_text(str(value), value)
        elif isinstance(value, str):
            cleaned = _AMOUNT_NOISE.sub("", value)
            if not cleaned:
                raise InvalidAmount(value, "empty")
            decimal_value = cls._from_text(cleaned, value)
        else:
            raise InvalidAmount(value, f"unsupported type {type(value).__name__}")

        if not decimal_value.is_finite():
            raise InvalidAmount(value, "not finite")
        if decimal_value < 0:
            raise InvalidAmount(value, "negative")

        logger.debug(f"Parsed {context}: {value!r} -> {decimal_value}")
        return decimal_value

    @staticmethod
    def _from_text(text: str, original) -> Decimal:
        try:
            return Decimal(text)
        except InvalidOperation:
            raise InvalidAmount(original, "not a number") from None

    @staticmethod
    def _wide_context(*values: Decimal):
        """Local context with room for every digit of values plus the kobo places"""
        context = getcontext().copy()
        numbers = [Decimal(v) for v in values]
        digits = sum(len(n.as_tuple().digits) for n in numbers)
        magnitude = max((n.adjusted() for n in numbers if n.is_finite()), default=0)
        context.prec = max(context.prec, digits + max(magnitude, 0) + 4)
        return localcontext(context)

    @classmethod
    def quantize_ngn(cls, amount: Decimal) -> Decimal:
        """Quantize amount to NGN precision (2 decimal places, half-up)"""
        amount = Decimal(amount)
        with cls._wide_context(amount):
            return amount.quantize(cls.NGN_PRECISION, rounding=ROUND_HALF_UP)

    @classmethod
    def round_percent(cls, value: Decimal) -> int:
        """Round a percentage to a whole number, .5 rounds away from zero"""
        return int(Decimal(value).quantize(cls.PERCENT_PRECISION, rounding=ROUND_HALF_UP))

    @classmethod
    def multiply_precise(cls, amount: Decimal, rate: Decimal) -> Decimal:
        """Multiply two values and quantize the product to NGN precision"""
        amount, rate = Decimal(amount), Decimal(rate)
        with cls._wide_context(amount, rate):
            return cls.quantize_ngn(amount * rate)

    @classmethod
    def subtract_precise(cls, minuend: Decimal, subtrahend: Decimal) -> Decimal:
        """Exact difference of two amounts, whatever their size"""
        minuend, subtrahend = Decimal(minuend), Decimal(subtrahend)
        with cls._wide_context(minuend, subtrahend):
            return minuend - subtrahend

    @classmethod
    def format_ngn(cls, amount: AmountLike, show_currency: bool = True) -> str:
        """Format amount as NGN string with thousands separators"""
        amount_decimal = cls.quantize_ngn(cls.parse_amount(amount, "display"))
        if amount_decimal == amount_decimal.to_integral_value():
            body = f"{amount_decimal:,.0f}"
        else:
            body = f"{amount_decimal:,.2f}"
        return f"₦{body}" if show_currency else body
