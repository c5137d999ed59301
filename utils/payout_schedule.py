"""Payout frequency helpers: next payout date and display labels"""

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional, Union

DateLike = Union[date, datetime]


class PayoutFrequency(Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


FREQUENCY_LABELS = {
    PayoutFrequency.WEEKLY: "Weekly",
    PayoutFrequency.BIWEEKLY: "Bi-weekly",
    PayoutFrequency.MONTHLY: "Monthly",
    PayoutFrequency.CUSTOM: "Custom",
}


def add_months(moment: DateLike, months: int) -> DateLike:
    """Shift by calendar months, clamping the day to the target month's end"""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def next_payout_date(
    frequency: Union[PayoutFrequency, str],
    start: DateLike,
    custom_dates: Optional[Iterable[DateLike]] = None,
) -> DateLike:
    """First payout after start for the given frequency"""
    frequency = PayoutFrequency(frequency)

    if frequency is PayoutFrequency.WEEKLY:
        return start + timedelta(days=7)
    if frequency is PayoutFrequency.BIWEEKLY:
        return start + timedelta(days=14)
    if frequency is PayoutFrequency.MONTHLY:
        return add_months(start, 1)

    # Custom schedules pay out on their earliest date
    dates = sorted(custom_dates or [])
    return dates[0] if dates else start


def format_frequency(frequency: Union[PayoutFrequency, str]) -> str:
    try:
        return FREQUENCY_LABELS[PayoutFrequency(frequency)]
    except ValueError:
        text = str(frequency)
        return text[:1].upper() + text[1:]
