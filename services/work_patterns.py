# services/work_patterns.py
from __future__ import annotations

import json
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, Optional

from core.log import get_logger
from core.settings import KEYS, WORK_PATTERNS
from datetime_utils import as_date, local_now
from models.task import Task
from models.work_pattern import WeeklyWorkSummary, WorkDayPattern
from storage.kv_store import KeyValueStore


logger = get_logger("patterns")


class WorkPatternService:
    """Completion history keyed by calendar day.

    The whole history lives in one key-value record and every change rewrites
    it, so concurrent writers resolve as last writer wins.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        *,
        clock: Callable[[], datetime] = local_now,
    ):
        self.store = store or KeyValueStore()
        self.clock = clock

    def _load(self) -> Dict[date, WorkDayPattern]:
        try:
            raw = self.store.get_json(KEYS.work_patterns)
        except json.JSONDecodeError as exc:
            logger.warning("Work history is unreadable, starting empty: %s", exc)
            return {}
        if not isinstance(raw, dict):
            return {}
        patterns: Dict[date, WorkDayPattern] = {}
        for key, value in raw.items():
            try:
                patterns[date.fromisoformat(key)] = WorkDayPattern.from_json(value)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unreadable work pattern for %s: %s", key, exc)
        return patterns

    def _save(self, patterns: Dict[date, WorkDayPattern]) -> None:
        payload = {day.isoformat(): patterns[day].to_json() for day in sorted(patterns)}
        self.store.set_json(KEYS.work_patterns, payload)

    def record_task_completion(self, task: Task) -> WorkDayPattern:
        now = self.clock()
        patterns = self._load()
        pattern = patterns.setdefault(now.date(), WorkDayPattern())
        pattern.add_task_completion(task, task.completed_at or now)
        self._save(patterns)
        logger.info("Completion recorded: %s (%s)", task.id, task.category.display_name)
        return pattern

    def record_work_session(self, start: datetime, end: Optional[datetime] = None) -> WorkDayPattern:
        patterns = self._load()
        pattern = patterns.setdefault(start.date(), WorkDayPattern())
        pattern.record_work_session(start, end)
        self._save(patterns)
        return pattern

    def get_work_pattern(self, day: date | datetime) -> Optional[WorkDayPattern]:
        return self._load().get(as_date(day))

    def get_recent_work_patterns(
        self, days: int = WORK_PATTERNS.summary_days
    ) -> Dict[date, WorkDayPattern]:
        """Patterns of today and the ``days - 1`` days before it."""
        today = self.clock().date()
        patterns = self._load()
        recent = {}
        for offset in range(days):
            day = today - timedelta(days=offset)
            if day in patterns:
                recent[day] = patterns[day]
        return recent

    def get_weekly_summary(self) -> WeeklyWorkSummary:
        return WeeklyWorkSummary.from_patterns(self.get_recent_work_patterns())

    def cleanup_old_data(self, keep_days: int = WORK_PATTERNS.retention_days) -> int:
        cutoff = self.clock() - timedelta(days=keep_days)
        patterns = self._load()
        stale = [day for day in patterns if datetime.combine(day, time.min) < cutoff]
        if not stale:
            return 0
        for day in stale:
            del patterns[day]
        self._save(patterns)
        logger.info("Dropped %d day(s) of work history", len(stale))
        return len(stale)


__all__ = ["WorkPatternService"]
