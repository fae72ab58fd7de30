# services/task_service.py
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional

from sqlmodel import Session, select

from core.categories import TaskCategory, TaskStatus, parse_category, parse_status
from core.log import get_logger
from core.settings import SCHEDULING
from datetime_utils import day_bounds, local_now
from models.task import Task
from services.work_patterns import WorkPatternService
from storage.db import get_session


logger = get_logger("tasks")

_UPDATABLE_FIELDS = {
    "title",
    "description",
    "category",
    "scheduled_start",
    "scheduled_end",
    "estimated_minutes",
    "status",
    "tags",
}


def _normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    if not tags:
        return []
    return sorted({tag.strip() for tag in tags if tag and tag.strip()})


def _check_title(title: str) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValueError("Task title cannot be empty")
    return cleaned


def _check_interval(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError("Task cannot end before it starts")


def _check_estimate(minutes: int) -> int:
    if minutes <= 0:
        raise ValueError("Estimated duration must be positive")
    return minutes


class TaskService:
    """Task store and the task provider for scheduling.

    Updates are row-level read-modify-write without version checks: two
    callers editing the same task concurrently resolve as last writer wins.
    """

    _listeners = {
        "after_create": set(),
        "after_update": set(),
        "after_delete": set(),
    }

    def __init__(
        self,
        session_factory: Callable[[], Session] = get_session,
        *,
        work_patterns: Optional[WorkPatternService] = None,
    ):
        self._session_factory = session_factory
        self.work_patterns = work_patterns

    @classmethod
    def subscribe(cls, event: str, callback):
        if event not in cls._listeners:
            raise ValueError(f"Unsupported event: {event}")
        cls._listeners[event].add(callback)

    @classmethod
    def unsubscribe(cls, event: str, callback):
        if event not in cls._listeners:
            return
        cls._listeners[event].discard(callback)

    @classmethod
    def _emit(cls, event: str, task_id: str):
        listeners = list(cls._listeners.get(event, []))
        for listener in listeners:
            try:
                listener(task_id)
            except Exception:
                logger.exception("Listener for %s failed on task %s", event, task_id)

    # ---------- CRUD ----------
    def add(
        self,
        title: str,
        category: TaskCategory | str,
        *,
        description: str = "",
        scheduled_start: Optional[datetime] = None,
        scheduled_end: Optional[datetime] = None,
        estimated_minutes: int = SCHEDULING.default_estimated_minutes,
        tags: Optional[Iterable[str]] = None,
        emit: bool = True,
    ) -> Task:
        _check_interval(scheduled_start, scheduled_end)
        with self._session_factory() as s:
            t = Task(
                title=_check_title(title),
                description=description or "",
                category=parse_category(category),
                scheduled_start=scheduled_start,
                scheduled_end=scheduled_end,
                estimated_minutes=_check_estimate(estimated_minutes),
                status=TaskStatus.PENDING,
                tags=_normalize_tags(tags),
            )
            s.add(t)
            s.commit()
            s.refresh(t)
        logger.debug("Task created: %s (%s)", t.id, t.category.display_name)
        if emit:
            self._emit("after_create", t.id)
        return t

    def get(self, task_id: str) -> Optional[Task]:
        with self._session_factory() as s:
            return s.get(Task, task_id)

    def list_all(self) -> List[Task]:
        with self._session_factory() as s:
            stmt = select(Task).order_by(Task.created_at.asc())
            return list(s.exec(stmt))

    def update(self, task_id: str, *, emit: bool = True, **fields) -> Optional[Task]:
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported task fields: {', '.join(sorted(unknown))}")
        with self._session_factory() as s:
            t = s.get(Task, task_id)
            if not t:
                return None
            previous_status = t.status
            completed_now = False
            if "title" in fields:
                t.title = _check_title(fields["title"])
            if "description" in fields:
                t.description = fields["description"] or ""
            if "category" in fields:
                t.category = parse_category(fields["category"])
            if "scheduled_start" in fields:
                t.scheduled_start = fields["scheduled_start"]
            if "scheduled_end" in fields:
                t.scheduled_end = fields["scheduled_end"]
            if "estimated_minutes" in fields:
                t.estimated_minutes = _check_estimate(fields["estimated_minutes"])
            if "tags" in fields:
                t.tags = _normalize_tags(fields["tags"])
            if "status" in fields:
                t.status = parse_status(fields["status"])
                if t.status is TaskStatus.COMPLETED and previous_status is not TaskStatus.COMPLETED:
                    t.completed_at = local_now()
                    completed_now = True
                elif t.status is not TaskStatus.COMPLETED:
                    t.completed_at = None
            _check_interval(t.scheduled_start, t.scheduled_end)
            s.add(t)
            s.commit()
            s.refresh(t)
        if completed_now and self.work_patterns is not None:
            self.work_patterns.record_task_completion(t)
        if emit:
            self._emit("after_update", t.id)
        return t

    def set_status(self, task_id: str, status: TaskStatus | str) -> Optional[Task]:
        return self.update(task_id, status=status)

    def reschedule(self, task_id: str, start: datetime, end: datetime) -> Optional[Task]:
        _check_interval(start, end)
        return self.update(task_id, scheduled_start=start, scheduled_end=end)

    def unschedule(self, task_id: str) -> Optional[Task]:
        return self.update(task_id, scheduled_start=None, scheduled_end=None)

    def delete(self, task_id: str, *, emit: bool = True) -> None:
        with self._session_factory() as s:
            t = s.get(Task, task_id)
            if not t:
                return
            s.delete(t)
            s.commit()
        if emit:
            self._emit("after_delete", task_id)

    # ---------- queries ----------
    def get_tasks_for_date(self, d: date | datetime) -> List[Task]:
        start, end = day_bounds(d)
        with self._session_factory() as s:
            stmt = (
                select(Task)
                .where(Task.scheduled_start >= start, Task.scheduled_start < end)
                .order_by(Task.scheduled_start.asc(), Task.created_at.asc())
            )
            return list(s.exec(stmt))

    def list_by_category(self, category: TaskCategory | str) -> List[Task]:
        with self._session_factory() as s:
            stmt = select(Task).where(Task.category == parse_category(category))
            return list(s.exec(stmt.order_by(Task.created_at.asc())))

    def list_by_status(self, status: TaskStatus | str) -> List[Task]:
        with self._session_factory() as s:
            stmt = select(Task).where(Task.status == parse_status(status))
            return list(s.exec(stmt.order_by(Task.created_at.asc())))

    def grouped_by_category(self) -> Dict[TaskCategory, List[Task]]:
        grouped: Dict[TaskCategory, List[Task]] = {category: [] for category in TaskCategory}
        for task in self.list_all():
            grouped[task.category].append(task)
        return grouped

    def counts_by_category(self, d: Optional[date] = None) -> Dict[TaskCategory, int]:
        tasks = self.get_tasks_for_date(d) if d is not None else self.list_all()
        return self._count(tasks)

    def completed_counts_by_category(self, d: Optional[date] = None) -> Dict[TaskCategory, int]:
        tasks = self.get_tasks_for_date(d) if d is not None else self.list_all()
        return self._count(t for t in tasks if t.status is TaskStatus.COMPLETED)

    @staticmethod
    def _count(tasks: Iterable[Task]) -> Dict[TaskCategory, int]:
        counts = {category: 0 for category in TaskCategory}
        for task in tasks:
            counts[task.category] += 1
        return counts


__all__ = ["TaskService"]
