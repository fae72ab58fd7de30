"""Collaborator interfaces consumed by the scheduling services."""
from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from models.task import Task
from models.user_settings import UserSettings


class SettingsProvider(Protocol):
    def get_settings(self) -> UserSettings:
        ...


class TaskProvider(Protocol):
    def get_tasks_for_date(self, d: date | datetime) -> Sequence[Task]:
        ...


__all__ = ["SettingsProvider", "TaskProvider"]
