"""
Tests for payout plan progress figures
"""

from decimal import Decimal

import pytest

from utils.exception_handler import InvalidAmount, InvalidPlan
from utils.plan_progress import PlanProgress, progress

pytestmark = pytest.mark.unit


class TestPlanProgress:

    def test_three_of_ten_payouts(self):
        result = progress(3, 10, 50000, 500000)

        assert result.progress_percent == 30
        assert result.amount_disbursed == Decimal("150000")
        assert result.remaining_amount == Decimal("350000")
        assert result.remaining_payouts == 7

    def test_new_plan(self):
        result = progress(0, 10, 50000, 500000)
        assert result.progress_percent == 0
        assert result.amount_disbursed == 0
        assert result.remaining_amount == Decimal("500000")

    def test_finished_plan(self):
        result = progress(10, 10, "50000", "500000")
        assert result.progress_percent == 100
        assert result.remaining_amount == 0
        assert result.remaining_payouts == 0

    @pytest.mark.parametrize("completed,duration,expected", [
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),  # 12.5 rounds up
        (1, 200, 1),  # 0.5 rounds up
        (1, 7, 14),
    ])
    def test_percent_rounding(self, completed, duration, expected):
        assert progress(completed, duration, 1000, 1000 * duration).progress_percent == expected

    def test_percent_in_range_for_consistent_plans(self):
        for duration in range(1, 25):
            for completed in range(duration + 1):
                assert 0 <= progress(completed, duration, 100, 100 * duration).progress_percent <= 100

    @pytest.mark.parametrize("duration", [0, -1])
    def test_non_positive_duration(self, duration):
        with pytest.raises(InvalidPlan):
            progress(0, duration, 50000, 500000)

    def test_negative_completed_payouts(self):
        with pytest.raises(InvalidPlan):
            progress(-1, 10, 50000, 500000)

    def test_over_completed_plan_passes_through(self, caplog):
        result = progress(12, 10, 50000, 500000)

        assert result.progress_percent == 120
        assert result.remaining_amount == Decimal("-100000")
        assert result.remaining_payouts == 0
        assert "12 completed payouts" in caplog.text

    def test_bad_amount(self):
        with pytest.raises(InvalidAmount):
            progress(1, 10, "fifty", 500000)

    def test_to_dict(self):
        assert progress(3, 10, "50000.00", "500000.00").to_dict() == {
            "progress_percent": 30,
            "amount_disbursed": "150000.00",
            "remaining_amount": "350000.00",
            "remaining_payouts": 7,
        }
        assert isinstance(progress(0, 1, 1, 1), PlanProgress)
