"""Command line entry points for LifeFlow habits."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .models import VALUE_TYPE_BOOLEAN, VALUE_TYPE_NUMERIC, Habit, HabitLog
from .models.settings import ROLLOVER_HOUR_KEY, SCORE_WINDOW_DAYS_KEY, WEEK_START_DAY_KEY
from .services import recurrence
from .services.calendar import parse_date
from .services.habits import build_daily_overview
from .services.settings import EngineSettings

logger = logging.getLogger(__name__)

SETTING_KEYS = {
    "rollover-hour": (ROLLOVER_HOUR_KEY, "Hour at which a new day starts"),
    "week-start": (WEEK_START_DAY_KEY, "First day of the week, Sunday = 0"),
    "score-window": (SCORE_WINDOW_DAYS_KEY, "Days covered by the adherence score"),
}


def _date_option(value: Optional[str], app: AppContext) -> date:
    if value is None:
        return app.today()
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--date") from exc


def _parse_days(raw: str) -> recurrence.SpecificDays:
    try:
        return recurrence.SpecificDays(int(part) for part in raw.split(",") if part.strip())
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--days") from exc


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track habits, streaks and adherence from the terminal."""

    if ctx.obj is None:
        ctx.obj = create_app_context()


@cli.command("add")
@click.argument("title")
@click.option("--days", "days", help="Comma-separated weekdays, Sunday = 0 (e.g. 1,3,5)")
@click.option("--weekly", "weekly", type=int, help="Completions required per week")
@click.option("--every", "every", type=int, help="Due every N days from creation")
@click.option("--numeric", is_flag=True, default=False, help="Track a quantity instead of yes/no")
@click.option("--target", type=float, help="Quantity that counts as done (numeric habits)")
@click.option("--unit", help="Unit label for numeric habits")
@click.option("--created", help="First day the habit can be due (YYYY-MM-DD)")
@click.pass_obj
def add_habit(
    app: AppContext,
    title: str,
    days: Optional[str],
    weekly: Optional[int],
    every: Optional[int],
    numeric: bool,
    target: Optional[float],
    unit: Optional[str],
    created: Optional[str],
) -> None:
    """Create a habit."""

    chosen = [flag for flag in (days, weekly, every) if flag is not None]
    if len(chosen) > 1:
        raise click.UsageError("Use only one of --days, --weekly or --every")

    try:
        if days is not None:
            rule: recurrence.Recurrence = _parse_days(days)
        elif weekly is not None:
            rule = recurrence.WeeklyTarget(weekly)
        else:
            rule = recurrence.EveryNDays(every if every is not None else 1)
        habit = Habit(
            title=title,
            value_type=VALUE_TYPE_NUMERIC if numeric else VALUE_TYPE_BOOLEAN,
            target=target,
            unit=unit,
            created_on=parse_date(created) if created else app.today(),
        )
        habit.set_recurrence(rule)
        habit = app.habit_repo.create(habit)
    except ValueError as exc:
        logger.warning("Rejected habit", extra={"title": title, "reason": str(exc)})
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Created habit #{habit.id}: {habit.title} ({recurrence.describe(rule)})")


@cli.command("log")
@click.argument("habit_id", type=int)
@click.option("--date", "on", help="Effective date to log (default: today)")
@click.option("--value", type=float, help="Quantity for numeric habits")
@click.option("--undone", is_flag=True, default=False, help="Record the day as not done")
@click.pass_obj
def log_habit(
    app: AppContext, habit_id: int, on: Optional[str], value: Optional[float], undone: bool
) -> None:
    """Record progress for a habit."""

    # A numeric day counts by value alone, so an undone day must carry none.
    if undone and value is not None:
        raise click.UsageError("--undone cannot be combined with --value")

    day = _date_option(on, app)
    habit = app.habit_repo.get_by_id(habit_id)
    if habit is None:
        raise click.ClickException(f"Habit {habit_id} does not exist")
    if habit.value_type == VALUE_TYPE_NUMERIC and value is None and not undone:
        raise click.UsageError("Numeric habits need --value")

    log = app.habit_repo.upsert_log(
        HabitLog(
            habit_id=habit_id,
            occurred_on=day,
            done=not undone,
            value=value,
            logged_at=datetime.now(timezone.utc),
        )
    )
    state = "not done" if undone else "done"
    detail = ""
    if log.value is not None:
        unit = f" {habit.unit}" if habit.unit else ""
        detail = f" ({log.value:g}{unit})"
    click.echo(f"Logged {habit.title} on {day.isoformat()}: {state}{detail}")


@cli.command("status")
@click.option("--date", "on", help="Day to report on (default: today)")
@click.pass_obj
def status(app: AppContext, on: Optional[str]) -> None:
    """Show due/done flags, streaks, score and weekly progress for active habits."""

    day = _date_option(on, app)
    settings = app.engine_settings()
    habits = app.habit_repo.list_all()
    if not habits:
        click.echo("No active habits.")
        return

    logs = app.habit_repo.list_logs_for(h.id for h in habits if h.id is not None)
    overview = build_daily_overview(
        habits,
        logs,
        today=day,
        week_start_day=settings.week_start_day,
        window_days=settings.score_window_days,
    )
    click.echo(f"Habits for {day.isoformat()}")
    for item in overview:
        mark = "x" if item.is_completed_today else ("!" if item.is_due_today else " ")
        click.echo(
            f"[{mark}] #{item.habit.id} {item.habit.title} "
            f"({recurrence.describe(item.habit.recurrence)}) "
            f"streak {item.streak.current}/{item.streak.best} "
            f"score {item.score} "
            f"week {item.weekly.completed}/{item.weekly.target}"
        )


@cli.command("setting")
@click.argument("name", type=click.Choice(sorted(SETTING_KEYS)))
@click.argument("value", type=int)
@click.pass_obj
def set_setting(app: AppContext, name: str, value: int) -> None:
    """Store an engine setting (rollover hour, week start, score window)."""

    key, description = SETTING_KEYS[name]
    current = app.engine_settings()
    candidate = {
        ROLLOVER_HOUR_KEY: current.rollover_hour,
        WEEK_START_DAY_KEY: current.week_start_day,
        SCORE_WINDOW_DAYS_KEY: current.score_window_days,
    }
    candidate[key] = value
    try:
        EngineSettings(**candidate)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    app.settings_repo.set(key, str(value), description)
    click.echo(f"{name} set to {value}")


def main() -> None:
    """Console-script entry point: configure logging, then run the CLI."""

    config = BaseConfig()
    setup_logging(config)
    cli(obj=create_app_context(config))


if __name__ == "__main__":  # pragma: no cover
    main()
