"""Apex Hour planner: validate, find slots and auto-schedule tasks from the console."""
from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from sqlmodel import Session

from core.categories import TaskCategory, TaskStatus, category_options, parse_category
from core.log import get_logger
from core.settings import SCHEDULING
from datetime_utils import format_range
from helpers.datetime_utils import (
    parse_date_input,
    parse_datetime_input,
    parse_time_range,
)
from models.scheduling import SchedulingValidationResult
from models.task import Task
from services.reminders import LoggingNotifier, ReminderService
from services.scheduling import SchedulingService
from services.settings_service import SettingsService
from services.task_service import TaskService
from services.work_patterns import WorkPatternService
from storage.db import get_session, init_db
from storage.kv_store import KeyValueStore


logger = get_logger("cli")


@dataclass
class App:
    """Collaborators created once per process and passed explicitly."""

    settings: SettingsService
    tasks: TaskService
    scheduling: SchedulingService
    reminders: ReminderService
    work_patterns: WorkPatternService

    @classmethod
    def create(cls, session_factory: Callable[[], Session] = get_session) -> "App":
        store = KeyValueStore(session_factory)
        settings = SettingsService(store)
        work_patterns = WorkPatternService(store)
        tasks = TaskService(session_factory, work_patterns=work_patterns)
        return cls(
            settings=settings,
            tasks=tasks,
            work_patterns=work_patterns,
            scheduling=SchedulingService(settings, tasks),
            reminders=ReminderService(settings, LoggingNotifier()),
        )


def _category(value: str) -> TaskCategory:
    try:
        return parse_category(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _day(value: str) -> date:
    parsed = parse_date_input(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"Invalid date: {value!r} (use YYYY-MM-DD)")
    return parsed


def _moment(value: str) -> datetime:
    parsed = parse_datetime_input(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"Invalid date/time: {value!r} (use YYYY-MM-DDTHH:MM)")
    return parsed


def _print_validation(result: SchedulingValidationResult) -> None:
    print("Valid" if result.is_valid else "Invalid")
    for conflict in result.conflicts:
        blocking = "blocking" if conflict.is_blocking else "advisory"
        print(f"  conflict [{conflict.severity.value}, {blocking}] {conflict.message} -> {conflict.suggested_action}")
    for warning in result.warnings:
        print(f"  warning {warning.message} -> {warning.remediation}")
    for suggestion in result.suggestions:
        slot = suggestion.time_slot
        extra = f" as {suggestion.alternative_category.display_name}" if suggestion.alternative_category else ""
        print(
            f"  suggestion [{suggestion.priority.value}] {format_range(slot.start, slot.end)}{extra}: "
            f"{suggestion.rationale}"
        )


# ---------- commands ----------
def cmd_validate(args, app: App) -> int:
    if args.task_id:
        task = app.tasks.get(args.task_id)
        if task is None:
            print(f"Task not found: {args.task_id}")
            return 1
        if args.category:
            task = task.copy_with(category=args.category)
    else:
        task = Task(title="(proposed)", category=args.category)
    result = app.scheduling.validate_task_scheduling(task, args.start, args.end)
    _print_validation(result)
    return 0 if result.is_valid else 1


def cmd_slots(args, app: App) -> int:
    slots = app.scheduling.find_available_time_slots(args.category, args.minutes, args.date, args.max)
    if not slots:
        print("No available slots")
        return 1
    for slot in slots:
        marker = "*" if slot.is_optimal else " "
        print(f"{marker} {format_range(slot.start, slot.end)}")
    return 0


def cmd_auto(args, app: App) -> int:
    task = app.tasks.get(args.task_id)
    if task is None:
        print(f"Task not found: {args.task_id}")
        return 1
    result = app.scheduling.auto_schedule_task(task, args.date)
    print(result.message)
    if not result.success:
        for alt in result.alternate_dates:
            print(f"  try {alt.isoformat()}")
        return 1
    scheduled = result.scheduled_task
    app.tasks.reschedule(scheduled.id, scheduled.scheduled_start, scheduled.scheduled_end)
    return 0


def cmd_add(args, app: App) -> int:
    task = app.tasks.add(
        args.title,
        args.category,
        description=args.description or "",
        scheduled_start=args.start,
        scheduled_end=args.end,
        estimated_minutes=args.minutes,
        tags=args.tag,
    )
    print(task.id)
    if task.scheduled_start is not None:
        apex_window = app.settings.get_settings().apex_hour_window(task.scheduled_start)
        if task.conflicts_with_apex_hour(*apex_window):
            print(f"Warning: overlaps your Apex Hour ({format_range(*apex_window)})")
    if task.category is TaskCategory.DEEP_WORK and task.scheduled_start is not None:
        app.reminders.schedule_deep_work_warning(task.scheduled_start, task.title)
    return 0


def cmd_done(args, app: App) -> int:
    task = app.tasks.set_status(args.task_id, TaskStatus.COMPLETED)
    if task is None:
        print(f"Task not found: {args.task_id}")
        return 1
    print(f"Completed: {task.title}")
    return 0


def cmd_summary(args, app: App) -> int:
    summary = app.work_patterns.get_weekly_summary()
    print(f"Work days: {summary.total_work_days}")
    print(f"Average work hours: {summary.average_work_hours:.1f}")
    for category, count in summary.completed_by_category.items():
        print(f"{category.display_name}: {count}")
    return 0


def cmd_settings(args, app: App) -> int:
    changes = {}
    if args.work_hours:
        start, end = args.work_hours
        changes.update(
            workday_start_hour=start.hour,
            workday_start_minute=start.minute,
            workday_end_hour=end.hour,
            workday_end_minute=end.minute,
        )
    if args.apex_minutes is not None:
        changes["apex_hour_duration_minutes"] = args.apex_minutes
    if changes:
        # Validated as a whole before anything is written.
        updated = app.settings.get_settings().copy_with(**changes)
        app.settings.save_settings(updated)
        app.reminders.reschedule_all()

    settings = app.settings.get_settings()
    today = date.today()
    print(f"Workday: {format_range(settings.workday_start(today), settings.workday_end(today))}")
    print(f"Apex Hour: {format_range(*settings.apex_hour_window(today))}")
    print(f"Notifications: {'on' if settings.notifications_enabled else 'off'} "
          f"({settings.notification_minutes_before} min before)")
    print(f"Hard stop: {'on' if settings.hard_stop_enabled else 'off'}")
    return 0


def _work_hours(value: str):
    parsed = parse_time_range(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"Invalid work hours: {value!r} (use HH:MM-HH:MM)")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__ or "")
    categories = ", ".join(category_options())
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Check a proposed interval")
    p.add_argument("--category", type=_category, help=f"One of: {categories}")
    p.add_argument("--start", type=_moment, required=True)
    p.add_argument("--end", type=_moment, required=True)
    p.add_argument("--task-id", help="Validate an existing task (skips its own slot)")
    p.set_defaults(handler=cmd_validate)

    p = sub.add_parser("slots", help="List free slots on a day")
    p.add_argument("--category", type=_category, required=True, help=f"One of: {categories}")
    p.add_argument("--minutes", type=int, required=True)
    p.add_argument("--date", type=_day, default=date.today())
    p.add_argument("--max", type=int, default=SCHEDULING.default_max_suggestions)
    p.set_defaults(handler=cmd_slots)

    p = sub.add_parser("auto", help="Auto-schedule an existing task")
    p.add_argument("--task-id", required=True)
    p.add_argument("--date", type=_day, default=date.today())
    p.set_defaults(handler=cmd_auto)

    p = sub.add_parser("add", help="Create a task")
    p.add_argument("--title", required=True)
    p.add_argument("--category", type=_category, required=True, help=f"One of: {categories}")
    p.add_argument("--description")
    p.add_argument("--start", type=_moment)
    p.add_argument("--end", type=_moment)
    p.add_argument("--minutes", type=int, default=SCHEDULING.default_estimated_minutes)
    p.add_argument("--tag", action="append", default=[])
    p.set_defaults(handler=cmd_add)

    p = sub.add_parser("done", help="Mark a task completed")
    p.add_argument("--task-id", required=True)
    p.set_defaults(handler=cmd_done)

    p = sub.add_parser("summary", help="Completions over the last week")
    p.set_defaults(handler=cmd_summary)

    p = sub.add_parser("settings", help="Show or change work hours")
    p.add_argument("--work-hours", type=_work_hours, help="HH:MM-HH:MM")
    p.add_argument("--apex-minutes", type=int)
    p.set_defaults(handler=cmd_settings)

    return parser


def main(argv: Optional[Sequence[str]] = None, *, app: Optional[App] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "validate" and args.category is None and not args.task_id:
        parser.error("validate needs --category unless --task-id is given")
    if app is None:
        init_db()
        app = App.create()
    try:
        return args.handler(args, app)
    except ValueError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}")
        return 2


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
