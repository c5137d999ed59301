"""
Tests for payout date scheduling and frequency labels
"""

from datetime import date, datetime

import pytest

from utils.payout_schedule import PayoutFrequency, add_months, format_frequency, next_payout_date

pytestmark = pytest.mark.unit

START = datetime(2024, 1, 15, 9, 30)


class TestNextPayoutDate:

    def test_weekly(self):
        assert next_payout_date("weekly", START) == datetime(2024, 1, 22, 9, 30)

    def test_biweekly(self):
        assert next_payout_date(PayoutFrequency.BIWEEKLY, START) == datetime(2024, 1, 29, 9, 30)

    def test_monthly(self):
        assert next_payout_date("monthly", START) == datetime(2024, 2, 15, 9, 30)

    def test_monthly_from_month_end(self):
        assert next_payout_date("monthly", date(2024, 1, 31)) == date(2024, 2, 29)
        assert next_payout_date("monthly", date(2023, 1, 31)) == date(2023, 2, 28)

    def test_custom_uses_earliest_date(self):
        dates = [datetime(2024, 5, 1), datetime(2024, 3, 1), datetime(2024, 4, 1)]
        assert next_payout_date("custom", START, dates) == datetime(2024, 3, 1)

    def test_custom_without_dates(self):
        assert next_payout_date("custom", START) == START

    def test_unknown_frequency(self):
        with pytest.raises(ValueError):
            next_payout_date("daily", START)


class TestAddMonths:

    @pytest.mark.parametrize("moment,months,expected", [
        (date(2024, 12, 10), 1, date(2025, 1, 10)),
        (date(2024, 3, 31), 1, date(2024, 4, 30)),
        (date(2024, 1, 31), 13, date(2025, 2, 28)),
        (date(2024, 5, 20), 0, date(2024, 5, 20)),
    ])
    def test_add_months(self, moment, months, expected):
        assert add_months(moment, months) == expected


class TestFormatFrequency:

    def test_known_labels(self):
        assert format_frequency("weekly") == "Weekly"
        assert format_frequency("biweekly") == "Bi-weekly"
        assert format_frequency(PayoutFrequency.MONTHLY) == "Monthly"

    def test_unknown_label_is_capitalised(self):
        assert format_frequency("quarterly") == "Quarterly"
