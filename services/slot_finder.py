"""Free slot discovery within a single workday."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from itertools import islice
from typing import Iterator, List, Optional, Sequence

from core.categories import TaskCategory
from core.log import get_logger
from core.settings import SCHEDULING
from datetime_utils import intervals_overlap
from models.scheduling import TimeSlot
from models.task import Task
from models.user_settings import UserSettings


logger = get_logger("slots")

SLOT_INCREMENT = timedelta(minutes=SCHEDULING.slot_increment_minutes)


def as_duration(value: timedelta | int) -> timedelta:
    """Accept a ``timedelta`` or a number of minutes."""
    if isinstance(value, timedelta):
        return value
    return timedelta(minutes=value)


def is_optimal_time(category: TaskCategory, start: datetime, settings: UserSettings) -> bool:
    """Category heuristic on time elapsed since the start of the workday."""
    elapsed = start - settings.workday_start(start)
    hours = timedelta(hours=1)
    if category is TaskCategory.DEEP_WORK:
        return elapsed < SCHEDULING.deep_work_morning_hours * hours
    if category is TaskCategory.SHALLOW_WORK:
        return (
            SCHEDULING.shallow_work_optimal_from_hours * hours
            <= elapsed
            < SCHEDULING.shallow_work_optimal_until_hours * hours
        )
    return elapsed >= SCHEDULING.wind_down_optimal_from_hours * hours


def _busy_intervals(tasks: Sequence[Task], exclude_task_id: Optional[str]):
    return [
        (task.scheduled_start, task.scheduled_end)
        for task in tasks
        if task.is_scheduled and (exclude_task_id is None or task.id != exclude_task_id)
    ]


def iter_free_slots(
    category: TaskCategory,
    duration: timedelta | int,
    day: date | datetime,
    settings: UserSettings,
    same_day_tasks: Sequence[Task],
    *,
    exclude_task_id: Optional[str] = None,
) -> Iterator[TimeSlot]:
    """Yield eligible slots in scan order.

    Candidates start at the beginning of the workday and advance in fixed
    increments. Each call scans afresh, so the generator can be re-created
    for identical results.
    """
    length = as_duration(duration)
    if length <= timedelta(0):
        raise ValueError("Slot duration must be positive")

    work_start = settings.workday_start(day)
    work_end = settings.workday_end(day)
    apex_start = settings.apex_hour_start(day)
    guard_apex = not category.can_schedule_during_apex_hour
    busy = _busy_intervals(same_day_tasks, exclude_task_id)

    current = work_start
    while current + length <= work_end:
        slot_end = current + length
        if guard_apex and intervals_overlap(current, slot_end, apex_start, work_end):
            current += SLOT_INCREMENT
            continue
        if not any(intervals_overlap(current, slot_end, b_start, b_end) for b_start, b_end in busy):
            yield TimeSlot(
                start=current,
                end=slot_end,
                is_optimal=is_optimal_time(category, current, settings),
            )
        current += SLOT_INCREMENT


def find_available_time_slots(
    category: TaskCategory,
    duration: timedelta | int,
    day: date | datetime,
    settings: UserSettings,
    same_day_tasks: Sequence[Task],
    *,
    max_suggestions: int = SCHEDULING.default_max_suggestions,
    exclude_task_id: Optional[str] = None,
) -> List[TimeSlot]:
    """Return up to ``max_suggestions`` free slots, optimal ones first.

    The first ``max_suggestions`` eligible slots of the scan are collected and
    then ordered: optimal before non-optimal, by start time within each group.
    """
    if max_suggestions < 0:
        raise ValueError("max_suggestions cannot be negative")
    if as_duration(duration) <= timedelta(0):
        raise ValueError("Slot duration must be positive")
    found = list(
        islice(
            iter_free_slots(
                category,
                duration,
                day,
                settings,
                same_day_tasks,
                exclude_task_id=exclude_task_id,
            ),
            max_suggestions,
        )
    )
    found.sort(key=lambda slot: (not slot.is_optimal, slot.start))
    logger.debug("%d slot(s) for %s on %s", len(found), category.display_name, day)
    return found


__all__ = [
    "SLOT_INCREMENT",
    "as_duration",
    "find_available_time_slots",
    "is_optimal_time",
    "iter_free_slots",
]
