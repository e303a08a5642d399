"""Pytest configuration and shared fixtures for LifeFlow tests.

Provides database fixtures for repository tests and builders for in-memory
habits and logs, so engine tests can run without touching a database.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from lifeflow.models import VALUE_TYPE_BOOLEAN, AppSetting, Habit, HabitLog  # noqa: F401
from lifeflow.services.calendar import parse_date
from lifeflow.services.recurrence import EveryNDays, Recurrence

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to a throwaway database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the Callable[[], Session] repositories expect."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


# =============================================================================
# Test Data Builders
# =============================================================================


@pytest.fixture
def habit_builder():
    """Build unsaved habits for pure engine tests.

    Returns:
        Callable: Function returning a Habit with the given recurrence
    """

    def _build(
        recurrence: Optional[Recurrence] = None,
        created_on: date | str = "2024-01-01",
        value_type: str = VALUE_TYPE_BOOLEAN,
        target: float | None = None,
        title: str = "Test Habit",
        habit_id: int | None = 1,
    ) -> Habit:
        habit = Habit(
            id=habit_id,
            title=title,
            value_type=value_type,
            target=target,
            created_on=parse_date(created_on),
        )
        habit.set_recurrence(recurrence or EveryNDays(1))
        return habit

    return _build


@pytest.fixture
def log_builder():
    """Build unsaved logs; ``done`` defaults to True."""

    def _build(
        occurred_on: date | str,
        done: bool = True,
        value: float | None = None,
        habit_id: int = 1,
    ) -> HabitLog:
        return HabitLog(
            habit_id=habit_id,
            occurred_on=parse_date(occurred_on),
            done=done,
            value=value,
        )

    return _build


@pytest.fixture
def logs_for(log_builder):
    """Build completed boolean logs for every date given."""

    def _build(dates: Iterable[date | str], habit_id: int = 1) -> list[HabitLog]:
        return [log_builder(d, habit_id=habit_id) for d in dates]

    return _build


@pytest.fixture
def habit_factory(db_session):
    """Factory for creating persisted habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        title: str = "Test Habit",
        recurrence: Optional[Recurrence] = None,
        created_on: date | str = "2024-01-01",
        value_type: str = VALUE_TYPE_BOOLEAN,
        target: float | None = None,
        archived: bool = False,
        position: int = 0,
    ) -> Habit:
        habit = Habit(
            title=title,
            value_type=value_type,
            target=target,
            created_on=parse_date(created_on),
            archived=archived,
            position=position,
        )
        habit.set_recurrence(recurrence or EveryNDays(1))
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit
