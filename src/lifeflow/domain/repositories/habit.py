"""Habit repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.habit import Habit, HabitLog
from ...services.calendar import DateLike
from ...services.habits import StreakResult


class HabitRepository(Protocol):
    """Repository for managing habits and their daily logs."""

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, include_archived: bool = False) -> list[Habit]:
        """List habits in display order."""
        ...

    def list_archived(self) -> list[Habit]:
        """List archived habits in display order."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: int) -> None:
        """Delete a habit and its logs."""
        ...

    def archive(self, habit_id: int) -> Habit:
        ...

    def unarchive(self, habit_id: int) -> Habit:
        ...

    def reorder(self, ordered_ids: Iterable[int]) -> None:
        """Set display positions from an ordered list of ids."""
        ...

    # Habit log operations
    def get_log(self, habit_id: int, occurred_on: DateLike) -> Optional[HabitLog]:
        """Get the log for one habit on one date."""
        ...

    def list_logs(
        self, habit_id: int, start: DateLike | None = None, end: DateLike | None = None
    ) -> list[HabitLog]:
        """Get logs for a habit, oldest first."""
        ...

    def list_logs_for(self, habit_ids: Iterable[int]) -> list[HabitLog]:
        """Get logs for several habits at once."""
        ...

    def upsert_log(self, log: HabitLog) -> HabitLog:
        """Insert or overwrite a habit log."""
        ...

    def delete_log(self, habit_id: int, occurred_on: DateLike) -> None:
        """Delete a habit log."""
        ...

    def toggle_log(self, habit_id: int, occurred_on: DateLike) -> HabitLog:
        """Flip completion of a boolean habit on a date."""
        ...

    def get_streaks(self, habit_id: int, *, today: DateLike) -> StreakResult:
        """Derive streaks for a habit."""
        ...
