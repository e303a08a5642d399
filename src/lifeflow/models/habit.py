"""Habit tracking data structures."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from ..services.recurrence import Recurrence

VALUE_TYPE_BOOLEAN = "boolean"
VALUE_TYPE_NUMERIC = "numeric"
VALUE_TYPES = (VALUE_TYPE_BOOLEAN, VALUE_TYPE_NUMERIC)

# Default colours, assigned round-robin as habits are created.
HABIT_COLORS = (
    "#ef4444", "#f97316", "#f59e0b", "#eab308", "#84cc16",
    "#22c55e", "#10b981", "#14b8a6", "#06b6d4", "#0ea5e9",
    "#3b82f6", "#6366f1", "#8b5cf6", "#a855f7", "#d946ef",
    "#ec4899", "#f43f5e",
)


class Habit(SQLModel, table=True):
    """A user-defined habit with its recurrence rule.

    The recurrence variant is flattened into nullable columns; use
    :attr:`recurrence` and :meth:`set_recurrence` rather than touching them.
    """

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    emoji: str = Field(default="✨", max_length=16)
    color: Optional[str] = Field(default=None, max_length=16)
    value_type: str = Field(default=VALUE_TYPE_BOOLEAN, max_length=16)
    target: Optional[float] = Field(default=None)
    unit: Optional[str] = Field(default=None, max_length=32)

    recurrence_kind: str = Field(default="every-N-days", max_length=32)
    recurrence_days: str = Field(default="", max_length=16)  # "1,3,5"
    times_per_week: Optional[int] = Field(default=None)
    interval: Optional[int] = Field(default=1)

    # No default: callers pass the effective date under their rollover hour.
    created_on: date = Field(nullable=False)
    archived: bool = Field(default=False, nullable=False, index=True)
    position: int = Field(default=0, nullable=False)

    logs: list["HabitLog"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitLog", back_populates="habit", cascade="all, delete-orphan"
        ),
    )

    @property
    def recurrence(self) -> "Recurrence":
        """Rebuild the recurrence variant from the stored columns."""

        from ..services.recurrence import recurrence_from_dict

        days = [int(d) for d in self.recurrence_days.split(",") if d.strip()]
        return recurrence_from_dict(
            {
                "kind": self.recurrence_kind,
                "days": days,
                "times_per_week": self.times_per_week,
                "interval": self.interval,
            }
        )

    def set_recurrence(self, rule: "Recurrence") -> None:
        """Replace the recurrence; only future evaluation changes."""

        from ..services.recurrence import recurrence_to_dict

        data = recurrence_to_dict(rule)
        self.recurrence_kind = data["kind"]
        self.recurrence_days = ",".join(str(d) for d in data.get("days", []))
        self.times_per_week = data.get("times_per_week")
        self.interval = data.get("interval")


class HabitLog(SQLModel, table=True):
    """Progress recorded for a habit on one effective calendar day."""

    __tablename__: ClassVar[str] = "habit_log"

    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    occurred_on: date = Field(primary_key=True, index=True)
    done: bool = Field(default=False, nullable=False)
    value: Optional[float] = Field(default=None)
    logged_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    habit: "Habit" = Relationship(
        back_populates="logs",
        sa_relationship=relationship("Habit", back_populates="logs"),
    )
