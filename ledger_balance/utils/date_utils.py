"""Date manipulation utilities"""

import re
from datetime import date, datetime, timedelta

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: object) -> date:
    """
    Parse a strict YYYY-MM-DD string into a calendar date.

    Raises:
        ValueError: If the value is not in YYYY-MM-DD form or is not a real date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise ValueError(f"{value!r} is not a YYYY-MM-DD date")
    return date.fromisoformat(value)


def add_days(from_date: date, days: int) -> date:
    """Date that falls the given number of calendar days after from_date"""
    return from_date + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end precedes start)"""
    return (end - start).days
