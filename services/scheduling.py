# services/scheduling.py
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List

from core.categories import TaskCategory, parse_category
from core.settings import SCHEDULING
from models.scheduling import SchedulingResult, SchedulingValidationResult, TimeSlot
from models.task import Task
from services.auto_scheduler import auto_schedule_task
from services.providers import SettingsProvider, TaskProvider
from services.scheduling_rules import validate_task_scheduling
from services.slot_finder import find_available_time_slots


class SchedulingService:
    """Binds the scheduling functions to the settings and task providers.

    Providers are read on every call; their errors propagate to the caller.
    """

    def __init__(self, settings_provider: SettingsProvider, task_provider: TaskProvider):
        self.settings_provider = settings_provider
        self.task_provider = task_provider

    def validate_task_scheduling(
        self,
        task: Task,
        proposed_start: datetime,
        proposed_end: datetime,
    ) -> SchedulingValidationResult:
        settings = self.settings_provider.get_settings()
        same_day = self.task_provider.get_tasks_for_date(proposed_start)
        return validate_task_scheduling(task, proposed_start, proposed_end, settings, same_day)

    def find_available_time_slots(
        self,
        category: TaskCategory | str,
        duration: timedelta | int,
        day: date | datetime,
        max_suggestions: int = SCHEDULING.default_max_suggestions,
    ) -> List[TimeSlot]:
        settings = self.settings_provider.get_settings()
        same_day = self.task_provider.get_tasks_for_date(day)
        return find_available_time_slots(
            parse_category(category),
            duration,
            day,
            settings,
            same_day,
            max_suggestions=max_suggestions,
        )

    def auto_schedule_task(self, task: Task, preferred_date: date | datetime) -> SchedulingResult:
        settings = self.settings_provider.get_settings()
        return auto_schedule_task(task, preferred_date, settings, self.task_provider.get_tasks_for_date)


__all__ = ["SchedulingService"]
