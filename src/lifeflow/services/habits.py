"""Habit engine: due dates, completion, streaks, adherence score and weekly progress.

Everything here is a pure function of (habit, logs, today). Nothing is cached
or persisted; callers re-run these whenever a habit or its logs change.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Iterator, Optional

from ..models.habit import VALUE_TYPE_BOOLEAN, VALUE_TYPE_NUMERIC, VALUE_TYPES, Habit, HabitLog
from . import recurrence
from .calendar import DateLike, add_days, date_range, days_between, parse_date, start_of_week

DEFAULT_WINDOW_DAYS = 30
# Per-day weight multiplier for the adherence score; yesterday weighs 0.95 of today.
RECENCY_DECAY = 0.95


@dataclass(frozen=True, slots=True)
class StreakResult:
    current: int
    best: int


@dataclass(frozen=True, slots=True)
class WeeklyProgress:
    completed: int
    target: int


@dataclass(slots=True)
class HabitStatus:
    """Everything the habit list shows for one habit on one day."""

    habit: Habit
    is_due_today: bool
    is_completed_today: bool
    today_log: Optional[HabitLog]
    streak: StreakResult
    score: int
    weekly: WeeklyProgress
    total_completions: int


def validate_habit(habit: Habit) -> Habit:
    """Raise ``ValueError`` if ``habit`` cannot be evaluated by the engine."""

    if not (habit.title or "").strip():
        raise ValueError("Habit title must not be empty")
    if habit.value_type not in VALUE_TYPES:
        raise ValueError(
            f"Habit value_type must be one of {', '.join(VALUE_TYPES)}, got {habit.value_type!r}"
        )
    if habit.target is not None and habit.target <= 0:
        raise ValueError(f"Habit target must be positive, got {habit.target}")
    if habit.created_on is None:
        raise ValueError("Habit created_on is required; pass the effective creation date")
    parse_date(habit.created_on)
    habit.recurrence  # noqa: B018 - rebuilding the rule validates the columns
    return habit


def is_due(habit: Habit, on: DateLike) -> bool:
    """Return True when ``habit`` expects an entry on ``on``."""

    return recurrence.is_due(habit.recurrence, habit.created_on, on)


def is_completed(habit: Habit, log: Optional[HabitLog]) -> bool:
    """Decide whether ``log`` satisfies ``habit``; ``None`` means nothing was logged."""

    if log is None:
        return False
    if habit.value_type == VALUE_TYPE_BOOLEAN:
        return bool(log.done)
    if habit.value_type == VALUE_TYPE_NUMERIC:
        if log.value is None:
            return False
        target = habit.target if habit.target is not None else 1
        return log.value >= target
    raise ValueError(f"Unknown habit value_type {habit.value_type!r}")


def _index_logs(logs: Iterable[HabitLog]) -> dict[date, HabitLog]:
    # One log per (habit, date) is guaranteed by storage.
    return {parse_date(log.occurred_on): log for log in logs}


def _due_dates(habit: Habit, start: DateLike, end: DateLike) -> Iterator[date]:
    """Yield due dates of ``habit`` between ``start`` and ``end`` inclusive."""

    rule = habit.recurrence
    created_on = parse_date(habit.created_on)
    first = max(parse_date(start), created_on)
    for day in date_range(first, end):
        if recurrence.is_due(rule, created_on, day):
            yield day


def compute_streaks(
    habit: Habit, logs: Iterable[HabitLog], *, today: DateLike
) -> StreakResult:
    """Return current and best streaks measured in consecutive due dates.

    Non-due days are skipped entirely, so a Monday-only habit keeps its
    streak across the week but loses it on a single missed Monday. A due
    ``today`` that is not yet completed ends the current streak.
    """

    by_day = _index_logs(logs)
    due = [
        is_completed(habit, by_day.get(day))
        for day in _due_dates(habit, habit.created_on, today)
    ]

    # Current streak: walk backwards from the latest due date until a miss.
    current = 0
    for completed in reversed(due):
        if not completed:
            break
        current += 1

    # Best streak: longest run of completed due dates anywhere in history.
    best = 0
    run = 0
    for completed in due:
        run = run + 1 if completed else 0
        best = max(best, run)

    return StreakResult(current=current, best=best)


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def adherence_score(
    habit: Habit,
    logs: Iterable[HabitLog],
    *,
    today: DateLike,
    window_days: int = DEFAULT_WINDOW_DAYS,
    decay: float = RECENCY_DECAY,
) -> int:
    """Recency-weighted percentage (0-100) of due dates completed in the window.

    The window is the ``window_days`` days ending on ``today``. A due date
    ``n`` days older than the newest due date in the window weighs
    ``decay ** n``, so the newest always weighs 1. Weights are ``Decimal`` so
    long windows do not underflow to zero. With no due dates in the window
    the score is 100.
    """

    if window_days < 1:
        raise ValueError(f"window_days must be at least 1, got {window_days}")
    if not 0 < decay < 1:
        raise ValueError(f"decay must be between 0 and 1 (exclusive), got {decay}")

    today = parse_date(today)
    # Never look back past creation; huge windows would overflow date arithmetic.
    lookback = min(window_days - 1, max(days_between(habit.created_on, today), 0))
    due = list(_due_dates(habit, add_days(today, -lookback), today))
    if not due:
        return 100

    by_day = _index_logs(logs)
    newest = due[-1]
    ratio = Decimal(str(decay))
    total_weight = Decimal(0)
    completed_weight = Decimal(0)
    for day in due:
        weight = ratio ** days_between(day, newest)
        total_weight += weight
        if is_completed(habit, by_day.get(day)):
            completed_weight += weight

    return _round_half_up(100 * completed_weight / total_weight)


def weekly_progress(
    habit: Habit, logs: Iterable[HabitLog], week_start: DateLike
) -> WeeklyProgress:
    """Count completed logs in the 7 days from ``week_start`` against the weekly target.

    Any completed log in the window counts, whether or not that day was due.
    """

    start = parse_date(week_start)
    end = add_days(start, 6)
    completed = sum(
        1
        for day, log in _index_logs(logs).items()
        if start <= day <= end and is_completed(habit, log)
    )
    target = recurrence.weekly_target(habit.recurrence, start, habit.created_on)
    return WeeklyProgress(completed=completed, target=target)


def habit_status(
    habit: Habit,
    logs: Iterable[HabitLog],
    *,
    today: DateLike,
    week_start_day: int = 1,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> HabitStatus:
    """Bundle the per-day view of a habit: due/done flags, streaks, score, week."""

    today = parse_date(today)
    logs = list(logs)
    today_log = _index_logs(logs).get(today)
    total = sum(
        1 for log in logs if parse_date(log.occurred_on) <= today and is_completed(habit, log)
    )
    return HabitStatus(
        habit=habit,
        is_due_today=is_due(habit, today),
        is_completed_today=is_completed(habit, today_log),
        today_log=today_log,
        streak=compute_streaks(habit, logs, today=today),
        score=adherence_score(habit, logs, today=today, window_days=window_days),
        weekly=weekly_progress(habit, logs, start_of_week(today, week_start_day)),
        total_completions=total,
    )


def build_daily_overview(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    *,
    today: DateLike,
    week_start_day: int = 1,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[HabitStatus]:
    """Return statuses for every non-archived habit in display order."""

    logs_by_habit: dict[Optional[int], list[HabitLog]] = defaultdict(list)
    for log in logs:
        logs_by_habit[log.habit_id].append(log)

    active = sorted(
        (h for h in habits if not h.archived),
        key=lambda h: (h.position, h.id if h.id is not None else 0),
    )
    return [
        habit_status(
            habit,
            logs_by_habit.get(habit.id, []),
            today=today,
            week_start_day=week_start_day,
            window_days=window_days,
        )
        for habit in active
    ]


__all__ = [
    "DEFAULT_WINDOW_DAYS",
    "RECENCY_DECAY",
    "HabitStatus",
    "StreakResult",
    "WeeklyProgress",
    "adherence_score",
    "build_daily_overview",
    "compute_streaks",
    "habit_status",
    "is_completed",
    "is_due",
    "validate_habit",
    "weekly_progress",
]
