"""Rule engine deciding whether a proposed task interval is acceptable.

Rules run in a fixed order and each one only appends to the result:

1. Apex Hour violation (hard conflict) for anything but Wind-Down work.
2. Close-to-Apex-Hour warning when rule 1 did not fire.
3. Overlap with other scheduled tasks of the same day (hard conflict each).
4. Outside work hours (warning).
5. Deep Work starting late in the day (warning).

Conflicts and warnings are data, not exceptions. Only malformed input
(an interval ending before it starts) raises ``ValueError``.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from core.categories import TaskCategory
from core.log import get_logger
from core.settings import SCHEDULING
from datetime_utils import format_range, intervals_overlap
from models.scheduling import (
    ConflictKind,
    SchedulingConflict,
    SchedulingValidationResult,
    SchedulingWarning,
    Severity,
    WarningKind,
)
from models.task import Task
from models.user_settings import UserSettings
from services.suggestions import generate_scheduling_suggestions


logger = get_logger("rules")

CLOSE_TO_APEX_BUFFER = timedelta(minutes=SCHEDULING.close_to_apex_buffer_minutes)
DEEP_WORK_MORNING = timedelta(hours=SCHEDULING.deep_work_morning_hours)


def _check_apex_hour(task, start, end, settings, result: SchedulingValidationResult) -> None:
    if task.category.can_schedule_during_apex_hour:
        return
    apex_start, apex_end = settings.apex_hour_window(start)
    if intervals_overlap(start, end, apex_start, apex_end):
        result.conflicts.append(
            SchedulingConflict(
                kind=ConflictKind.APEX_HOUR_VIOLATION,
                message=(
                    f"This {task.category.display_name} task conflicts with your "
                    f"Apex Hour ({format_range(apex_start, apex_end)})"
                ),
                severity=Severity.HIGH,
                suggested_action="Move to earlier in the day or change to Wind-Down task",
            )
        )
    elif end > apex_start - CLOSE_TO_APEX_BUFFER:
        result.warnings.append(
            SchedulingWarning(
                kind=WarningKind.CLOSE_TO_APEX_HOUR,
                message="This task ends close to your Apex Hour. Consider allowing more buffer time.",
                remediation="Schedule earlier or reduce task duration",
            )
        )


def _check_overlaps(task, start, end, same_day_tasks, result: SchedulingValidationResult) -> None:
    for other in same_day_tasks:
        if other.id == task.id or not other.is_scheduled:
            continue
        if intervals_overlap(start, end, other.scheduled_start, other.scheduled_end):
            result.conflicts.append(
                SchedulingConflict(
                    kind=ConflictKind.TASK_OVERLAP,
                    message=(
                        f'Overlaps with "{other.title}" '
                        f"({format_range(other.scheduled_start, other.scheduled_end)})"
                    ),
                    severity=Severity.HIGH,
                    suggested_action="Choose a different time slot",
                )
            )


def _check_work_hours(start, end, settings, result: SchedulingValidationResult) -> None:
    work_start = settings.workday_start(start)
    work_end = settings.workday_end(start)
    if start < work_start or end > work_end:
        result.warnings.append(
            SchedulingWarning(
                kind=WarningKind.OUTSIDE_WORK_HOURS,
                message=(
                    "Task is scheduled outside your normal work hours "
                    f"({format_range(work_start, work_end)})"
                ),
                remediation="Consider rescheduling within work hours",
            )
        )


def _check_deep_work_timing(task, start, settings, result: SchedulingValidationResult) -> None:
    if task.category is not TaskCategory.DEEP_WORK:
        return
    if start > settings.workday_start(start) + DEEP_WORK_MORNING:
        result.warnings.append(
            SchedulingWarning(
                kind=WarningKind.SUBOPTIMAL_TIMING,
                message="Deep Work tasks are most effective in the morning when energy is highest",
                remediation="Consider scheduling this task earlier in the day",
            )
        )


def validate_task_scheduling(
    task: Task,
    proposed_start: datetime,
    proposed_end: datetime,
    settings: UserSettings,
    same_day_tasks: Sequence[Task],
) -> SchedulingValidationResult:
    """Evaluate ``task`` at ``[proposed_start, proposed_end)``.

    ``same_day_tasks`` are the tasks scheduled on the day of
    ``proposed_start``; the task itself is skipped by id.
    """
    if proposed_end < proposed_start:
        raise ValueError(
            f"Proposed end {proposed_end.isoformat()} is before start {proposed_start.isoformat()}"
        )

    result = SchedulingValidationResult()
    _check_apex_hour(task, proposed_start, proposed_end, settings, result)
    _check_overlaps(task, proposed_start, proposed_end, same_day_tasks, result)
    _check_work_hours(proposed_start, proposed_end, settings, result)
    _check_deep_work_timing(task, proposed_start, settings, result)

    if not result.is_valid or result.warnings:
        result.suggestions.extend(
            generate_scheduling_suggestions(
                task, proposed_start, proposed_end, settings, same_day_tasks
            )
        )

    logger.debug(
        "Validated %s at %s: valid=%s conflicts=%d warnings=%d suggestions=%d",
        task.id,
        format_range(proposed_start, proposed_end),
        result.is_valid,
        len(result.conflicts),
        len(result.warnings),
        len(result.suggestions),
    )
    return result


__all__ = ["validate_task_scheduling", "CLOSE_TO_APEX_BUFFER", "DEEP_WORK_MORNING"]
