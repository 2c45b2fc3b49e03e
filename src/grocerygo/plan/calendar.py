"""Day-of-week arithmetic for meal plan week windows.

A plan covers the seven consecutive calendar days starting at ``week_of``.
``week_of`` may fall on any weekday, so a day name is always resolved to
the matching day *inside* that window rather than to a fixed Monday-based
week. All arithmetic uses ``datetime.date`` (calendar fields), never
instants, so no timezone offset can shift a meal to a neighbouring day.
"""

from datetime import date, timedelta
from typing import Any

from grocerygo.normalize.dates import parse_plan_date

WEEK_LENGTH = 7

# Sunday-first indexing, matching how day names are presented to users
DAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_DAY_INDEX: dict[str, int] = {}
for _index, _name in enumerate(DAY_NAMES):
    _DAY_INDEX[_name.lower()] = _index
    _DAY_INDEX[_name[:3].lower()] = _index


def day_index(day_name: Any) -> int | None:
    """
    Map a day name to its Sunday-based index (Sunday=0 ... Saturday=6).

    Case-insensitive and whitespace-trimmed; three-letter abbreviations are
    accepted. Unrecognized names return None.
    """
    if not isinstance(day_name, str):
        return None
    return _DAY_INDEX.get(day_name.strip().lower())


def weekday_index(value: date) -> int:
    """Sunday-based weekday index of a date."""
    # date.weekday() is Monday=0
    return (value.weekday() + 1) % WEEK_LENGTH


def weekday_name(value: date) -> str:
    """Full weekday name of a date."""
    return DAY_NAMES[weekday_index(value)]


def resolve_date(week_of: date | str, day_name: str) -> date | None:
    """
    Resolve a day name to its calendar date within the plan's week window.

    The result is always in ``[week_of, week_of + 6]``: for a plan starting
    on Wednesday 2024-06-05, "Monday" resolves to 2024-06-10, not to the
    Monday before the plan started. Unrecognized day names (or an
    unparseable ``week_of``) return None so the caller can leave the meal
    unscheduled.
    """
    start = parse_plan_date(week_of)
    target = day_index(day_name)
    if start is None or target is None:
        return None

    offset = target - weekday_index(start)
    if offset < 0:
        offset += WEEK_LENGTH
    return start + timedelta(days=offset)


def date_for_offset(week_of: date | str, offset: int) -> date | None:
    """
    Resolve a numeric day offset to a date within the week window.

    Offsets wrap around the week, so the n-th meal of a plan without an
    explicit schedule lands on day ``n % 7``.
    """
    start = parse_plan_date(week_of)
    if start is None:
        return None
    return start + timedelta(days=offset % WEEK_LENGTH)


def week_window(week_of: date | str) -> tuple[date, date]:
    """Return the inclusive (start, end) dates of a plan's week."""
    start = parse_plan_date(week_of)
    if start is None:
        raise ValueError(f"Invalid week_of date: {week_of!r}")
    return start, start + timedelta(days=WEEK_LENGTH - 1)


def week_dates(week_of: date | str) -> list[date]:
    """All seven dates of a plan's week, in calendar order."""
    start, _ = week_window(week_of)
    return [start + timedelta(days=i) for i in range(WEEK_LENGTH)]


def dates_overlap(week_of_1: date | str, week_of_2: date | str) -> bool:
    """Check whether two plans' inclusive 7-day windows share at least one day."""
    start1, end1 = week_window(week_of_1)
    start2, end2 = week_window(week_of_2)
    return start1 <= end2 and start2 <= end1


def is_date_within_plan(week_of: date | str, today: date | str | None = None) -> bool:
    """
    Check whether ``today`` (default: the local current date) falls in the plan's week.

    An unreadable ``today`` is never within a plan.
    """
    start, end = week_window(week_of)
    current = parse_plan_date(today) if today is not None else date.today()
    if current is None:
        return False
    return start <= current <= end


def next_week_start(start_day: str = "Monday", today: date | None = None) -> date:
    """
    Find the next occurrence of ``start_day`` strictly after today.

    Used as the default ``week_of`` for new plans. Unknown day names fall
    back to Monday.
    """
    current = today or date.today()
    target = day_index(start_day)
    if target is None:
        target = DAY_NAMES.index("Monday")

    days_until = target - weekday_index(current)
    if days_until <= 0:
        days_until += WEEK_LENGTH
    return current + timedelta(days=days_until)
