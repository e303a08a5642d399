"""SQLModel table exports."""

from .habit import HABIT_COLORS, VALUE_TYPE_BOOLEAN, VALUE_TYPE_NUMERIC, VALUE_TYPES, Habit, HabitLog
from .settings import AppSetting

__all__ = [
    "AppSetting",
    "HABIT_COLORS",
    "Habit",
    "HabitLog",
    "VALUE_TYPE_BOOLEAN",
    "VALUE_TYPE_NUMERIC",
    "VALUE_TYPES",
]
