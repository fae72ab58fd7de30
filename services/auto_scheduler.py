"""Place a task into the first suitable slot, looking ahead when the day is full."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, List, Sequence

from core.log import get_logger
from core.settings import SCHEDULING
from datetime_utils import as_date, format_range
from models.scheduling import SchedulingResult
from models.task import Task
from models.user_settings import UserSettings
from services.slot_finder import find_available_time_slots


logger = get_logger("auto")

TasksForDate = Callable[[date], Sequence[Task]]


def _has_slot(task: Task, day: date, settings: UserSettings, tasks_for_date: TasksForDate) -> bool:
    return bool(
        find_available_time_slots(
            task.category,
            timedelta(minutes=task.estimated_minutes),
            day,
            settings,
            tasks_for_date(day),
            max_suggestions=1,
            exclude_task_id=task.id,
        )
    )


def find_alternate_dates(
    task: Task,
    preferred_date: date | datetime,
    settings: UserSettings,
    tasks_for_date: TasksForDate,
) -> List[date]:
    """Up to ``max_alternate_dates`` following days with room for ``task``."""
    start_day = as_date(preferred_date)
    found: List[date] = []
    for offset in range(1, SCHEDULING.alternate_date_lookahead_days + 1):
        day = start_day + timedelta(days=offset)
        if _has_slot(task, day, settings, tasks_for_date):
            found.append(day)
            if len(found) >= SCHEDULING.max_alternate_dates:
                break
    return found


def auto_schedule_task(
    task: Task,
    preferred_date: date | datetime,
    settings: UserSettings,
    tasks_for_date: TasksForDate,
) -> SchedulingResult:
    """Schedule ``task`` on ``preferred_date`` using its estimated duration.

    ``tasks_for_date`` returns the tasks already scheduled on a given day.
    The returned task is a copy; persisting it is up to the caller.
    """
    if task.estimated_minutes <= 0:
        raise ValueError("Estimated duration must be positive")

    day = as_date(preferred_date)
    slots = find_available_time_slots(
        task.category,
        timedelta(minutes=task.estimated_minutes),
        day,
        settings,
        tasks_for_date(day),
        max_suggestions=1,
        exclude_task_id=task.id,
    )

    if not slots:
        alternates = find_alternate_dates(task, day, settings, tasks_for_date)
        logger.info(
            "No slot for task %s on %s; %d alternate date(s)", task.id, day, len(alternates)
        )
        return SchedulingResult(
            success=False,
            message="No available time slots found for this task on the selected date",
            alternate_dates=alternates,
        )

    best = slots[0]
    scheduled = task.copy_with(scheduled_start=best.start, scheduled_end=best.end)
    logger.info("Task %s auto-scheduled at %s", task.id, format_range(best.start, best.end))
    return SchedulingResult(
        success=True,
        message=f"Task scheduled for {format_range(best.start, best.end)}",
        scheduled_task=scheduled,
    )


__all__ = ["auto_schedule_task", "find_alternate_dates"]
