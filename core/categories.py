"""Task categories and statuses."""
from __future__ import annotations

from enum import Enum
from typing import Dict


class TaskCategory(str, Enum):
    # Ordered by cognitive load: high, medium, low.
    DEEP_WORK = "deep_work"
    SHALLOW_WORK = "shallow_work"
    WIND_DOWN = "wind_down"

    @property
    def display_name(self) -> str:
        return CATEGORY_META[self]["label"]

    @property
    def description(self) -> str:
        return CATEGORY_META[self]["description"]

    @property
    def can_schedule_during_apex_hour(self) -> bool:
        return self is TaskCategory.WIND_DOWN


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def display_name(self) -> str:
        return STATUS_LABELS[self]


CATEGORY_META: Dict[TaskCategory, Dict[str, str]] = {
    TaskCategory.DEEP_WORK: {
        "label": "Deep Work",
        "description": "Algorithm design, debugging, complex coding",
    },
    TaskCategory.SHALLOW_WORK: {
        "label": "Shallow Work",
        "description": "Emails, meetings, code reviews",
    },
    TaskCategory.WIND_DOWN: {
        "label": "Wind-Down",
        "description": "Documentation, planning, refactoring",
    },
}

STATUS_LABELS: Dict[TaskStatus, str] = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
    TaskStatus.CANCELLED: "Cancelled",
}


def _lookup_key(value: str) -> str:
    return value.strip().lower().replace("-", "_").replace(" ", "_")


def parse_category(value: TaskCategory | str) -> TaskCategory:
    """Accept enum members, values (``deep_work``) or labels (``Wind-Down``)."""
    if isinstance(value, TaskCategory):
        return value
    key = _lookup_key(value)
    for category in TaskCategory:
        if key in (category.value, _lookup_key(category.display_name)):
            return category
    raise ValueError(f"Unknown task category: {value!r}")


def parse_status(value: TaskStatus | str) -> TaskStatus:
    if isinstance(value, TaskStatus):
        return value
    key = _lookup_key(value)
    for status in TaskStatus:
        if key == status.value:
            return status
    raise ValueError(f"Unknown task status: {value!r}")


def category_options() -> Dict[str, str]:
    """Return mapping of choice values -> labels."""
    return {category.value: meta["label"] for category, meta in CATEGORY_META.items()}


__all__ = [
    "CATEGORY_META",
    "STATUS_LABELS",
    "TaskCategory",
    "TaskStatus",
    "category_options",
    "parse_category",
    "parse_status",
]
