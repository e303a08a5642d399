"""SQLModel implementation of Habit repository."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...models.habit import HABIT_COLORS, VALUE_TYPE_BOOLEAN, Habit, HabitLog
from ...services.calendar import DateLike, parse_date
from ...services.habits import StreakResult, compute_streaks, validate_habit

logger = logging.getLogger(__name__)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _require(self, session: Session, habit_id: int) -> Habit:
        habit = session.get(Habit, habit_id)
        if habit is None:
            raise KeyError(f"Habit {habit_id} does not exist")
        return habit

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, include_archived: bool = False) -> list[Habit]:
        """List habits in display order, optionally including archived ones."""
        with self.session_factory() as session:
            statement = select(Habit).order_by(Habit.position, Habit.id)  # type: ignore

            if not include_archived:
                statement = statement.where(Habit.archived == False)  # noqa: E712

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_archived(self) -> list[Habit]:
        """List archived habits in display order."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.archived == True)  # noqa: E712
                .order_by(Habit.position, Habit.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Validate and persist a new habit at the end of the list."""
        validate_habit(habit)
        with self.session_factory() as session:
            if not habit.position:
                last = session.exec(select(func.max(Habit.position))).one()
                habit.position = 0 if last is None else last + 1
            if habit.color is None:
                count = session.exec(select(func.count()).select_from(Habit)).one()
                habit.color = HABIT_COLORS[count % len(HABIT_COLORS)]
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            logger.info(
                "Habit created",
                extra={"habit_id": habit.id, "recurrence": habit.recurrence_kind},
            )
            return habit

    def update(self, habit: Habit) -> Habit:
        """Validate and save changes to an existing habit."""
        validate_habit(habit)
        with self.session_factory() as session:
            if habit.id is None:
                raise KeyError("Cannot update a habit that was never saved")
            self._require(session, habit.id)
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, habit_id: int) -> None:
        """Delete a habit and all of its logs."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit:
                for log in session.exec(select(HabitLog).where(HabitLog.habit_id == habit_id)):
                    session.delete(log)
                session.delete(habit)
                session.commit()
                logger.info("Habit deleted", extra={"habit_id": habit_id})

    def _set_archived(self, habit_id: int, archived: bool) -> Habit:
        with self.session_factory() as session:
            habit = self._require(session, habit_id)
            habit.archived = archived
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def archive(self, habit_id: int) -> Habit:
        return self._set_archived(habit_id, True)

    def unarchive(self, habit_id: int) -> Habit:
        return self._set_archived(habit_id, False)

    def reorder(self, ordered_ids: Iterable[int]) -> None:
        """Rewrite display positions to follow ``ordered_ids``.

        Every id must exist; on a missing id nothing is changed.
        """
        ids = list(ordered_ids)
        if len(set(ids)) != len(ids):
            raise ValueError("Habit ids in a reorder must be unique")
        with self.session_factory() as session:
            habits = [self._require(session, habit_id) for habit_id in ids]
            for position, habit in enumerate(habits):
                habit.position = position
                session.add(habit)
            session.commit()
        logger.info("Habits reordered", extra={"habit_ids": ids})

    # Habit log operations
    def get_log(self, habit_id: int, occurred_on: DateLike) -> Optional[HabitLog]:
        """Get the log for a habit on one date, or None when nothing was logged."""
        with self.session_factory() as session:
            obj = session.get(HabitLog, (habit_id, parse_date(occurred_on)))
            if obj:
                session.expunge(obj)
            return obj

    def list_logs(
        self,
        habit_id: int,
        start: DateLike | None = None,
        end: DateLike | None = None,
    ) -> list[HabitLog]:
        """Get logs for a habit, oldest first, optionally bounded by date."""
        with self.session_factory() as session:
            statement = select(HabitLog).where(HabitLog.habit_id == habit_id)
            if start is not None:
                statement = statement.where(HabitLog.occurred_on >= parse_date(start))
            if end is not None:
                statement = statement.where(HabitLog.occurred_on <= parse_date(end))
            statement = statement.order_by(HabitLog.occurred_on)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_logs_for(self, habit_ids: Iterable[int]) -> list[HabitLog]:
        """Get every log belonging to any of ``habit_ids``."""
        ids = list(habit_ids)
        if not ids:
            return []
        with self.session_factory() as session:
            statement = (
                select(HabitLog)
                .where(HabitLog.habit_id.in_(ids))  # type: ignore[attr-defined]
                .order_by(HabitLog.habit_id, HabitLog.occurred_on)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert_log(self, log: HabitLog) -> HabitLog:
        """Insert or overwrite the log for (habit, date)."""
        occurred_on = parse_date(log.occurred_on)
        with self.session_factory() as session:
            self._require(session, log.habit_id)
            existing = session.get(HabitLog, (log.habit_id, occurred_on))

            if existing:
                existing.done = log.done
                existing.value = log.value
                existing.logged_at = log.logged_at
                target = existing
            else:
                log.occurred_on = occurred_on
                target = log
            session.add(target)
            session.commit()
            session.refresh(target)
            session.expunge(target)
            logger.info(
                "Habit logged",
                extra={
                    "habit_id": target.habit_id,
                    "occurred_on": occurred_on.isoformat(),
                    "done": target.done,
                    "value": target.value,
                },
            )
            return target

    def delete_log(self, habit_id: int, occurred_on: DateLike) -> None:
        """Delete a habit log; afterwards the date reads as never logged."""
        with self.session_factory() as session:
            log = session.get(HabitLog, (habit_id, parse_date(occurred_on)))
            if log:
                session.delete(log)
                session.commit()

    def toggle_log(self, habit_id: int, occurred_on: DateLike) -> HabitLog:
        """Flip ``done`` for a boolean habit on one date."""
        habit = self.get_by_id(habit_id)
        if habit is None:
            raise KeyError(f"Habit {habit_id} does not exist")
        if habit.value_type != VALUE_TYPE_BOOLEAN:
            raise ValueError(f"Habit {habit_id} is numeric; log a value instead of toggling")
        existing = self.get_log(habit_id, occurred_on)
        done = not (existing.done if existing else False)
        return self.upsert_log(
            HabitLog(
                habit_id=habit_id,
                occurred_on=parse_date(occurred_on),
                done=done,
                logged_at=datetime.now(timezone.utc),
            )
        )

    def get_streaks(self, habit_id: int, *, today: DateLike) -> StreakResult:
        """Derive current and best streaks from the stored history."""
        habit = self.get_by_id(habit_id)
        if habit is None:
            raise KeyError(f"Habit {habit_id} does not exist")
        return compute_streaks(habit, self.list_logs(habit_id), today=today)


__all__ = ["SQLModelHabitRepository"]
