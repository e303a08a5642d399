"""Service module exports."""

from . import calendar, habits, recurrence, settings

__all__ = ["calendar", "habits", "recurrence", "settings"]
