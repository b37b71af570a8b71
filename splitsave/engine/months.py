"""
Month arithmetic.

Months are keyed as "YYYY-MM" strings, which sort chronologically
as plain strings. That is what contribution records store.
"""

import re
from calendar import monthrange
from datetime import date, datetime, timedelta

from splitsave.engine.errors import ValidationError
from splitsave.models.household import MONTH_KEY_PATTERN

_MONTH_KEY_RE = re.compile(MONTH_KEY_PATTERN)


def validate_month_key(month: str) -> str:
    if not isinstance(month, str) or not _MONTH_KEY_RE.match(month):
        raise ValidationError(
            f"Month must be in YYYY-MM format (got {month!r})", field="month"
        )
    return month


def parse_month_key(month: str) -> tuple[int, int]:
    validate_month_key(month)
    year, month_number = month.split("-")
    return int(year), int(month_number)


def month_key(value: date) -> str:
    """Month key for a date or datetime."""
    return f"{value.year:04d}-{value.month:02d}"


def next_month(month: str) -> str:
    year, month_number = parse_month_key(month)
    if month_number == 12:
        return f"{year + 1:04d}-01"
    return f"{year:04d}-{month_number + 1:02d}"


def previous_month(month: str) -> str:
    year, month_number = parse_month_key(month)
    if month_number == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month_number - 1:02d}"


def first_day(month: str) -> date:
    year, month_number = parse_month_key(month)
    return date(year, month_number, 1)


def last_day(month: str) -> date:
    year, month_number = parse_month_key(month)
    return date(year, month_number, monthrange(year, month_number)[1])


def month_name(month: str) -> str:
    """e.g. "2024-03" -> "March 2024"."""
    return first_day(month).strftime("%B %Y")


def occurs_in_month(moment: datetime, month: str) -> bool:
    return month_key(moment) == validate_month_key(month)


def months_between(start: date, end: date) -> int:
    """
    Calendar months from start to end, ignoring the day of month.

    Negative when end is before start.
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def days_until(target: date, as_of: date) -> int:
    return (target - as_of).days


def clamp_day(year: int, month_number: int, day: int) -> date:
    """The given day in the month, pulled back to the month's last day."""
    return date(year, month_number, min(day, monthrange(year, month_number)[1]))


def last_weekday(year: int, month_number: int, weekday: int) -> date:
    """Last occurrence of weekday (Monday=0) in the month."""
    current = date(year, month_number, monthrange(year, month_number)[1])
    while current.weekday() != weekday:
        current -= timedelta(days=1)
    return current
