"""Habit recurrence rules and the due-date evaluator.

A recurrence is one of exactly three variants. Every consumer dispatches on
them with an ``isinstance`` chain that ends in ``TypeError`` so a new variant
cannot slip through unhandled.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, ClassVar, Iterable, Union

from .calendar import DateLike, add_days, date_range, day_of_week, days_between, parse_date

SPECIFIC_DAYS = "specific-days"
WEEKLY_TARGET = "weekly-target"
EVERY_N_DAYS = "every-N-days"


def _whole_number(name: str, value: object) -> int:
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class SpecificDays:
    """Due on the listed weekdays (Sunday = 0). An empty set is never due."""

    days: frozenset[int]

    kind: ClassVar[str] = SPECIFIC_DAYS

    def __init__(self, days: Iterable[int]) -> None:
        normalized = frozenset(_whole_number("specific-days value", d) for d in days)
        invalid = sorted(d for d in normalized if not 0 <= d <= 6)
        if invalid:
            raise ValueError(f"specific-days values must be within 0-6, got {invalid}")
        object.__setattr__(self, "days", normalized)


@dataclass(frozen=True, slots=True)
class WeeklyTarget:
    """Due every day; the constraint is a completion count per week."""

    times_per_week: int

    kind: ClassVar[str] = WEEKLY_TARGET

    def __post_init__(self) -> None:
        _whole_number("times_per_week", self.times_per_week)
        if self.times_per_week < 0:
            raise ValueError(f"times_per_week must be >= 0, got {self.times_per_week}")


@dataclass(frozen=True, slots=True)
class EveryNDays:
    """Due on the creation day and every ``interval`` days after it."""

    interval: int

    kind: ClassVar[str] = EVERY_N_DAYS

    def __post_init__(self) -> None:
        _whole_number("every-N-days interval", self.interval)
        if self.interval < 1:
            raise ValueError(f"every-N-days interval must be >= 1, got {self.interval}")


Recurrence = Union[SpecificDays, WeeklyTarget, EveryNDays]


def _unknown(rule: object) -> TypeError:
    return TypeError(f"Unsupported recurrence rule: {rule!r}")


def is_due(rule: Recurrence, created_on: DateLike, on: DateLike) -> bool:
    """Return True when a habit with ``rule`` expects an entry on ``on``."""

    offset = days_between(created_on, on)
    if offset < 0:
        return False

    if isinstance(rule, SpecificDays):
        return day_of_week(on) in rule.days
    if isinstance(rule, WeeklyTarget):
        return True
    if isinstance(rule, EveryNDays):
        return offset % rule.interval == 0
    raise _unknown(rule)


def weekly_target(rule: Recurrence, week_start: DateLike, created_on: DateLike) -> int:
    """Return how many completions the week beginning ``week_start`` asks for."""

    if isinstance(rule, SpecificDays):
        return len(rule.days)
    if isinstance(rule, WeeklyTarget):
        return rule.times_per_week
    if isinstance(rule, EveryNDays):
        start = parse_date(week_start)
        return sum(
            1 for day in date_range(start, add_days(start, 6)) if is_due(rule, created_on, day)
        )
    raise _unknown(rule)


def recurrence_to_dict(rule: Recurrence) -> dict[str, Any]:
    """Serialize a rule to the ``{"kind": ...}`` storage shape."""

    if isinstance(rule, SpecificDays):
        return {"kind": rule.kind, "days": sorted(rule.days)}
    if isinstance(rule, WeeklyTarget):
        return {"kind": rule.kind, "times_per_week": rule.times_per_week}
    if isinstance(rule, EveryNDays):
        return {"kind": rule.kind, "interval": rule.interval}
    raise _unknown(rule)


def recurrence_from_dict(data: dict[str, Any]) -> Recurrence:
    """Rebuild a rule from :func:`recurrence_to_dict` output."""

    kind = data.get("kind")

    def required(field: str) -> int:
        value = data.get(field)
        if value is None:
            raise ValueError(f"Recurrence {kind!r} is missing field {field!r}")
        return int(value)

    if kind == SPECIFIC_DAYS:
        return SpecificDays(data.get("days") or ())
    if kind == WEEKLY_TARGET:
        return WeeklyTarget(required("times_per_week"))
    if kind == EVERY_N_DAYS:
        return EveryNDays(required("interval"))
    raise ValueError(f"Unknown recurrence kind {kind!r}")


def describe(rule: Recurrence) -> str:
    """Short human label used by the CLI."""

    if isinstance(rule, SpecificDays):
        names = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
        return ",".join(names[d] for d in sorted(rule.days)) or "never"
    if isinstance(rule, WeeklyTarget):
        return f"{rule.times_per_week}x/week"
    if isinstance(rule, EveryNDays):
        return "daily" if rule.interval == 1 else f"every {rule.interval} days"
    raise _unknown(rule)


__all__ = [
    "EVERY_N_DAYS",
    "SPECIFIC_DAYS",
    "WEEKLY_TARGET",
    "EveryNDays",
    "Recurrence",
    "SpecificDays",
    "WeeklyTarget",
    "describe",
    "is_due",
    "recurrence_from_dict",
    "recurrence_to_dict",
    "weekly_target",
]
