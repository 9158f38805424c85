"""
Calendar helpers shared by the analytics services.

Weekday indexes used across the package start on Sunday (0 = Sunday,
6 = Saturday) so histograms and weekly labels line up with each other.
"""

import calendar
from datetime import date, datetime
from typing import Union

WEEKDAY_LABELS = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
MONTH_LABELS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


def subtract_months(value: date, months: int) -> date:
    """
    Step back a number of calendar months.

    The day of month is clamped to the length of the target month, so
    March 31 minus one month is February 28 (or 29 in leap years).
    """
    month_index = value.year * 12 + (value.month - 1) - months
    year, month_zero_based = divmod(month_index, 12)
    month = month_zero_based + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def parse_calendar_date(value: Union[str, date, datetime]) -> date:
    """
    Parse an ISO date or date-time into a calendar date.

    Date-times are truncated to their date portion as written; no timezone
    conversion is applied.

    Raises:
        ValueError: empty or malformed string
        TypeError: value is not a string, date or datetime
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty date string")
        return date.fromisoformat(text[:10])
    raise TypeError(f"Unsupported date value: {value!r}")


def sunday_first_weekday(value: date) -> int:
    return (value.weekday() + 1) % 7


def short_weekday_label(value: date) -> str:
    """'Sun', 'Mon', ... independent of the process locale."""
    return WEEKDAY_LABELS[sunday_first_weekday(value)]


def month_day_label(value: date) -> str:
    """'Oct 3' style label, independent of the process locale."""
    return f"{MONTH_LABELS[value.month - 1]} {value.day}"
