"""Utility functions and helpers for the spiritual analytics application."""

from .date_utils import (
    parse_calendar_date,
    subtract_months,
    sunday_first_weekday,
    short_weekday_label,
    month_day_label
)
from .log_utils import setup_logging

__all__ = [
    'parse_calendar_date',
    'subtract_months',
    'sunday_first_weekday',
    'short_weekday_label',
    'month_day_label',
    'setup_logging'
]
