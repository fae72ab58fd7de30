# models/task.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional
import uuid

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from core.categories import TaskCategory, TaskStatus
from core.settings import SCHEDULING
from datetime_utils import intervals_overlap, local_now
from models.columns import naive_datetime_column


def new_task_id() -> str:
    return str(uuid.uuid4())


class Task(SQLModel, table=True):
    id: str = Field(default_factory=new_task_id, primary_key=True)
    title: str
    description: str = ""
    category: TaskCategory = Field(index=True)
    scheduled_start: Optional[datetime] = Field(
        default=None, sa_column=naive_datetime_column(index=True)
    )
    scheduled_end: Optional[datetime] = Field(default=None, sa_column=naive_datetime_column())
    estimated_minutes: int = SCHEDULING.default_estimated_minutes
    status: TaskStatus = Field(default=TaskStatus.PENDING, index=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(
        default_factory=local_now, sa_column=naive_datetime_column(nullable=False)
    )
    completed_at: Optional[datetime] = Field(default=None, sa_column=naive_datetime_column())

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_start is not None and self.scheduled_end is not None

    def conflicts_with_apex_hour(self, apex_start: datetime, apex_end: datetime) -> bool:
        if not self.is_scheduled:
            return False
        if self.category.can_schedule_during_apex_hour:
            return False
        return intervals_overlap(self.scheduled_start, self.scheduled_end, apex_start, apex_end)

    def copy_with(self, **changes: Any) -> "Task":
        """Detached copy with ``changes`` applied; the original is left untouched."""
        data = self.model_dump()
        data["tags"] = list(self.tags or [])
        data.update(changes)
        return Task(**data)


__all__ = ["Task", "new_task_id"]
