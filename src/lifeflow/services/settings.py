"""Resolve the day-boundary settings the habit engine takes as explicit arguments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..config import BaseConfig
from ..models.settings import (
    ROLLOVER_HOUR_KEY,
    SCORE_WINDOW_DAYS_KEY,
    WEEK_START_DAY_KEY,
    AppSetting,
)


class SettingsSource(Protocol):
    """Anything that can look up a stored setting by key."""

    def get(self, key: str) -> Optional[AppSetting]:  # pragma: no cover - interface
        ...


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Rollover hour, week start and score window, threaded into every engine call."""

    rollover_hour: int = 4
    week_start_day: int = 1
    score_window_days: int = 30

    def __post_init__(self) -> None:
        if not 0 <= self.rollover_hour <= 23:
            raise ValueError(f"rollover_hour must be 0-23, got {self.rollover_hour}")
        if not 0 <= self.week_start_day <= 6:
            raise ValueError(f"week_start_day must be 0-6, got {self.week_start_day}")
        if self.score_window_days < 1:
            raise ValueError(f"score_window_days must be >= 1, got {self.score_window_days}")


def _stored_int(source: SettingsSource, key: str, default: int) -> int:
    setting = source.get(key)
    if setting is None:
        return default
    try:
        return int(setting.value)
    except ValueError as exc:
        raise ValueError(f"Stored setting {key!r} is not an integer: {setting.value!r}") from exc


def load_engine_settings(source: SettingsSource, config: BaseConfig) -> EngineSettings:
    """Stored values win; configuration supplies the defaults."""

    return EngineSettings(
        rollover_hour=_stored_int(source, ROLLOVER_HOUR_KEY, config.ROLLOVER_HOUR),
        week_start_day=_stored_int(source, WEEK_START_DAY_KEY, config.WEEK_START_DAY),
        score_window_days=_stored_int(source, SCORE_WINDOW_DAYS_KEY, config.SCORE_WINDOW_DAYS),
    )


__all__ = ["EngineSettings", "SettingsSource", "load_engine_settings"]
