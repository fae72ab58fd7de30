"""Per-day completion history and the weekly roll-up built from it."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from core.categories import TaskCategory, parse_category
from models.task import Task


def _parse_moment(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _format_moment(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class TaskCompletionRecord:
    category: TaskCategory
    completed_at: datetime
    estimated_minutes: int

    def to_json(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "completedAt": self.completed_at.isoformat(),
            "estimatedMinutes": self.estimated_minutes,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "TaskCompletionRecord":
        return cls(
            category=parse_category(data["category"]),
            completed_at=datetime.fromisoformat(data["completedAt"]),
            estimated_minutes=int(data["estimatedMinutes"]),
        )


@dataclass
class WorkDayPattern:
    """What happened on one calendar day."""

    work_start: Optional[datetime] = None
    work_end: Optional[datetime] = None
    total_work_minutes: int = 0
    completions: List[TaskCompletionRecord] = field(default_factory=list)

    @property
    def completed_by_category(self) -> Dict[TaskCategory, int]:
        counts = {category: 0 for category in TaskCategory}
        for record in self.completions:
            counts[record.category] += 1
        return counts

    def add_task_completion(self, task: Task, completed_at: datetime) -> TaskCompletionRecord:
        record = TaskCompletionRecord(
            category=task.category,
            completed_at=completed_at,
            estimated_minutes=task.estimated_minutes,
        )
        self.completions.append(record)
        return record

    def record_work_session(self, start: datetime, end: Optional[datetime] = None) -> None:
        # The first start of the day sticks; later sessions only move the end.
        if self.work_start is None:
            self.work_start = start
        if end is not None:
            if end < self.work_start:
                raise ValueError("Work session cannot end before the workday started")
            self.work_end = end
            self.total_work_minutes = int((end - self.work_start).total_seconds() // 60)

    def to_json(self) -> Dict[str, Any]:
        return {
            "workStart": _format_moment(self.work_start),
            "workEnd": _format_moment(self.work_end),
            "totalWorkMinutes": self.total_work_minutes,
            "completions": [record.to_json() for record in self.completions],
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "WorkDayPattern":
        return cls(
            work_start=_parse_moment(data.get("workStart")),
            work_end=_parse_moment(data.get("workEnd")),
            total_work_minutes=int(data.get("totalWorkMinutes", 0)),
            completions=[TaskCompletionRecord.from_json(item) for item in data.get("completions", [])],
        )


@dataclass(frozen=True)
class WeeklyWorkSummary:
    total_work_days: int
    average_work_hours: float
    completed_by_category: Dict[TaskCategory, int]

    @property
    def total_completed(self) -> int:
        return sum(self.completed_by_category.values())

    @classmethod
    def from_patterns(cls, patterns: Mapping[date, WorkDayPattern]) -> "WeeklyWorkSummary":
        counts = {category: 0 for category in TaskCategory}
        if not patterns:
            return cls(total_work_days=0, average_work_hours=0.0, completed_by_category=counts)
        total_minutes = 0
        for pattern in patterns.values():
            total_minutes += pattern.total_work_minutes
            for category, count in pattern.completed_by_category.items():
                counts[category] += count
        return cls(
            total_work_days=len(patterns),
            average_work_hours=total_minutes / 60.0 / len(patterns),
            completed_by_category=counts,
        )


__all__ = ["TaskCompletionRecord", "WeeklyWorkSummary", "WorkDayPattern"]
