"""
Tests for Naira amount parsing, rounding and display
"""

from decimal import Decimal

import pytest

from utils.decimal_precision import MonetaryDecimal
from utils.exception_handler import InvalidAmount

pytestmark = pytest.mark.unit


class TestParseAmount:

    @pytest.mark.parametrize("raw,expected", [
        ("500000", Decimal("500000")),
        ("₦500,000", Decimal("500000")),
        ("  1,234.50 ", Decimal("1234.50")),
        ("ngn 20", Decimal("20")),
        (0, Decimal("0")),
        (0.1, Decimal("0.1")),
        (Decimal("7.25"), Decimal("7.25")),
    ])
    def test_valid(self, raw, expected):
        assert MonetaryDecimal.parse_amount(raw) == expected

    def test_float_goes_through_string(self):
        assert MonetaryDecimal.parse_amount(0.1) == Decimal("0.1")
        assert MonetaryDecimal.parse_amount(0.1) != Decimal(0.1)

    @pytest.mark.parametrize("raw", [None, False, "", "₦", "1e", "-5", Decimal("-0.01"), float("inf"), float("nan"), {}])
    def test_invalid(self, raw):
        with pytest.raises(InvalidAmount):
            MonetaryDecimal.parse_amount(raw)


class TestRounding:

    def test_quantize_half_up(self):
        assert MonetaryDecimal.quantize_ngn(Decimal("2.345")) == Decimal("2.35")
        assert MonetaryDecimal.quantize_ngn(Decimal("2.344")) == Decimal("2.34")

    def test_round_percent_half_up(self):
        assert MonetaryDecimal.round_percent(Decimal("12.5")) == 13
        assert MonetaryDecimal.round_percent(Decimal("12.49")) == 12

    def test_multiply_precise(self):
        assert MonetaryDecimal.multiply_precise(Decimal("1234.56"), Decimal("0.06")) == Decimal("74.07")


class TestFormatNgn:

    def test_whole_naira(self):
        assert MonetaryDecimal.format_ngn(Decimal("500000")) == "₦500,000"

    def test_with_kobo(self):
        assert MonetaryDecimal.format_ngn("1234.5") == "₦1,234.50"

    def test_without_symbol(self):
        assert MonetaryDecimal.format_ngn(60000, show_currency=False) == "60,000"


class TestLargeAmounts:

    def test_quantize_beyond_default_precision(self):
        assert MonetaryDecimal.quantize_ngn(Decimal("1E27")) == Decimal("1" + "0" * 27)
        assert str(MonetaryDecimal.quantize_ngn(Decimal("1" + "0" * 30 + ".005"))) == "1" + "0" * 30 + ".01"

    def test_multiply_is_exact(self):
        amount = Decimal("1" * 35)
        assert MonetaryDecimal.multiply_precise(amount, Decimal("0.12")) == Decimal("1" + "3" * 33 + ".32")

    def test_format_large_amount(self):
        assert MonetaryDecimal.format_ngn("1" + "0" * 27) == "₦1," + ",".join(["000"] * 9)
