"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from sqlmodel import Session

from .config import BaseConfig
from .domain.repositories import HabitRepository
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from .services.calendar import effective_today
from .services.settings import EngineSettings, load_engine_settings


@dataclass
class AppContext:
    """Centralized application context with repositories and engine settings."""

    config: BaseConfig
    session_factory: Callable[[], Session]
    habit_repo: HabitRepository
    settings_repo: SQLModelSettingsRepository

    def engine_settings(self) -> EngineSettings:
        """Re-read settings so a changed rollover hour applies immediately."""
        return load_engine_settings(self.settings_repo, self.config)

    def today(self, *, now: Optional[datetime] = None) -> date:
        """Effective today under the stored rollover hour."""
        return effective_today(self.engine_settings().rollover_hour, now=now)


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    _, session_factory = bootstrap_database(config)
    return AppContext(
        config=config,
        session_factory=session_factory,
        habit_repo=SQLModelHabitRepository(session_factory),
        settings_repo=SQLModelSettingsRepository(session_factory),
    )
