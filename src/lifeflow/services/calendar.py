"""Calendar-date helpers shared by the habit engine.

Every function here works on calendar dates, never on instants, so daylight
saving shifts cannot leak into day arithmetic. Callers may pass either
``datetime.date`` objects or ``YYYY-MM-DD`` strings; anything else fails fast.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterator, Union

DateLike = Union[date, str]

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
DEFAULT_ROLLOVER_HOUR = 4


def parse_date(value: DateLike) -> date:
    """Return ``value`` as a ``date``; raise ``ValueError`` on malformed input."""

    # datetime subclasses date; an instant is not a calendar date
    if isinstance(value, datetime):
        raise ValueError(f"Expected a calendar date, got datetime {value.isoformat()!r}")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Invalid calendar date {value!r}; expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid calendar date {value!r}: {exc}") from exc


def format_date(value: DateLike) -> str:
    return parse_date(value).isoformat()


def effective_date(timestamp: datetime, rollover_hour: int = DEFAULT_ROLLOVER_HOUR) -> date:
    """Map a wall-clock instant to the calendar day it belongs to.

    The user's day runs from ``rollover_hour`` to ``rollover_hour`` the next
    morning, so 02:30 with a rollover of 4 still counts as the previous day.
    """

    if not 0 <= rollover_hour <= 23:
        raise ValueError(f"rollover_hour must be between 0 and 23, got {rollover_hour}")
    return (timestamp - timedelta(hours=rollover_hour)).date()


def effective_today(
    rollover_hour: int = DEFAULT_ROLLOVER_HOUR, *, now: datetime | None = None
) -> date:
    """Return today's effective date under the configured rollover hour."""

    return effective_date(now or datetime.now(), rollover_hour)


def day_of_week(value: DateLike) -> int:
    """Return 0-6 with Sunday = 0."""

    return (parse_date(value).weekday() + 1) % 7


def days_between(start: DateLike, end: DateLike) -> int:
    """Signed number of calendar days from ``start`` to ``end``."""

    return (parse_date(end) - parse_date(start)).days


def add_days(value: DateLike, days: int) -> date:
    return parse_date(value) + timedelta(days=days)


def start_of_week(value: DateLike, week_start_day: int = 1) -> date:
    """Return the first day of the week containing ``value``.

    ``week_start_day`` uses the same numbering as :func:`day_of_week`
    (Sunday = 0, Monday = 1).
    """

    if not 0 <= week_start_day <= 6:
        raise ValueError(f"week_start_day must be between 0 and 6, got {week_start_day}")
    day = parse_date(value)
    offset = (day_of_week(day) - week_start_day) % 7
    return day - timedelta(days=offset)


def date_range(start: DateLike, end: DateLike) -> Iterator[date]:
    """Yield each date from ``start`` to ``end`` inclusive."""

    cursor = parse_date(start)
    last = parse_date(end)
    while cursor <= last:
        yield cursor
        cursor += timedelta(days=1)


__all__ = [
    "DateLike",
    "DEFAULT_ROLLOVER_HOUR",
    "add_days",
    "date_range",
    "day_of_week",
    "days_between",
    "effective_date",
    "effective_today",
    "format_date",
    "parse_date",
    "start_of_week",
]
