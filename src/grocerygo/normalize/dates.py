"""Calendar-date parsing for plan anchors and planned meal dates.

Dates cross the API and record-store boundary as ``YYYY-MM-DD`` strings,
sometimes with a time component appended. Only the calendar fields are
read: the year, month and day written in the string are the day the meal
belongs to, so no timezone conversion ever moves it to a neighbouring day.
"""

import re
from datetime import date, datetime
from typing import Any

_DATE_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?=$|[T ])")


def parse_plan_date(value: Any) -> date | None:
    """
    Parse a plan date from a date, datetime or ISO-8601 string.

    Examples:
        "2024-06-05" -> date(2024, 6, 5)
        "2024-06-05T23:30:00-07:00" -> date(2024, 6, 5)
        "June 5th" -> None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    match = _DATE_PREFIX.match(value.strip())
    if not match:
        return None

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_plan_date(value: date) -> str:
    """Format a date as the ``YYYY-MM-DD`` string stored for plans."""
    return value.strftime("%Y-%m-%d")
