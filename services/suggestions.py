"""Remediation suggestions for rejected or questionable task times."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Sequence

from core.categories import TaskCategory
from core.settings import SCHEDULING
from datetime_utils import intervals_overlap
from models.scheduling import SchedulingSuggestion, SuggestionPriority, TimeSlot
from models.task import Task
from models.user_settings import UserSettings
from services.slot_finder import find_available_time_slots


def generate_scheduling_suggestions(
    task: Task,
    proposed_start: datetime,
    proposed_end: datetime,
    settings: UserSettings,
    same_day_tasks: Sequence[Task],
) -> List[SchedulingSuggestion]:
    """Advisory alternatives; nothing here changes the task."""
    suggestions: List[SchedulingSuggestion] = []

    duration = proposed_end - proposed_start
    if task.category is TaskCategory.DEEP_WORK and duration > timedelta(0):
        morning_slots = find_available_time_slots(
            task.category,
            duration,
            proposed_start,
            settings,
            same_day_tasks,
            max_suggestions=SCHEDULING.deep_work_suggestion_slots,
            exclude_task_id=task.id,
        )
        for slot in morning_slots:
            if slot.start < proposed_start and slot.is_optimal:
                suggestions.append(
                    SchedulingSuggestion(
                        time_slot=slot,
                        rationale="Morning hours are optimal for Deep Work tasks",
                        priority=SuggestionPriority.HIGH,
                    )
                )

    apex_start, apex_end = settings.apex_hour_window(proposed_start)
    if (
        not task.category.can_schedule_during_apex_hour
        and intervals_overlap(proposed_start, proposed_end, apex_start, apex_end)
    ):
        suggestions.append(
            SchedulingSuggestion(
                time_slot=TimeSlot(start=proposed_start, end=proposed_end, is_optimal=False),
                rationale="Change to Wind-Down task to allow scheduling during Apex Hour",
                priority=SuggestionPriority.MEDIUM,
                alternative_category=TaskCategory.WIND_DOWN,
            )
        )

    return suggestions


__all__ = ["generate_scheduling_suggestions"]
