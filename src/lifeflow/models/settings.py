"""Application-level settings stored in the database."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

ROLLOVER_HOUR_KEY = "rollover_hour"
WEEK_START_DAY_KEY = "week_start_day"
SCORE_WINDOW_DAYS_KEY = "score_window_days"


class AppSetting(SQLModel, table=True):
    """Key-value storage for user-adjustable options such as the day rollover."""

    __tablename__: ClassVar[str] = "app_setting"

    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(nullable=False, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
