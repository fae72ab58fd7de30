"""Local reminders around the Apex Hour and the end of the workday.

This module only decides *what* to remind and *when*; delivery belongs to
a :class:`Notifier`.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Protocol

from core.log import get_logger
from core.settings import REMINDER_IDS, SCHEDULING
from datetime_utils import format_clock, local_now
from services.providers import SettingsProvider


logger = get_logger("reminders")

DEEP_WORK_WARNING_DELAY = timedelta(seconds=2)


@dataclass(frozen=True)
class Reminder:
    id: int
    title: str
    body: str
    fire_at: datetime
    channel: str


class Notifier(Protocol):
    def schedule(self, reminder: Reminder) -> None:
        ...

    def cancel_all(self) -> None:
        ...


class LoggingNotifier:
    """Keeps pending reminders in memory and writes them to the log."""

    def __init__(self):
        self.pending: Dict[int, Reminder] = {}

    def schedule(self, reminder: Reminder) -> None:
        self.pending[reminder.id] = reminder
        logger.info("Reminder %d '%s' at %s", reminder.id, reminder.title, reminder.fire_at.isoformat())

    def cancel_all(self) -> None:
        self.pending.clear()


class ReminderService:
    def __init__(
        self,
        settings_provider: SettingsProvider,
        notifier: Notifier,
        *,
        clock: Callable[[], datetime] = local_now,
    ):
        self.settings_provider = settings_provider
        self.notifier = notifier
        self.clock = clock

    def _deliver(self, reminder: Reminder) -> Reminder:
        try:
            self.notifier.schedule(reminder)
        except Exception:
            logger.exception("Failed to schedule reminder %d", reminder.id)
            raise
        return reminder

    def schedule_apex_hour_reminder(self) -> Optional[Reminder]:
        settings = self.settings_provider.get_settings()
        if not settings.notifications_enabled:
            return None
        now = self.clock()
        apex_start = settings.apex_hour_start(now)
        fire_at = apex_start - timedelta(minutes=settings.notification_minutes_before)
        if fire_at <= now:
            return None
        return self._deliver(
            Reminder(
                id=REMINDER_IDS.apex_hour,
                title="Apex Hour Starting Soon",
                body=(
                    f"Heads up! Your Apex Hour starts at {format_clock(apex_start)}. "
                    "Time to start wrapping up complex problem-solving."
                ),
                fire_at=fire_at,
                channel="apex_hour_reminders",
            )
        )

    def schedule_workday_end_reminder(self) -> Optional[Reminder]:
        settings = self.settings_provider.get_settings()
        if not settings.hard_stop_enabled:
            return None
        now = self.clock()
        workday_end = settings.workday_end(now)
        if workday_end <= now:
            return None
        return self._deliver(
            Reminder(
                id=REMINDER_IDS.workday_end,
                title="Workday Complete",
                body="It's time to close your IDE. Anything left can be tackled tomorrow. Great job today!",
                fire_at=workday_end,
                channel="workday_end",
            )
        )

    def schedule_deep_work_warning(self, scheduled_time: datetime, task_title: str) -> Optional[Reminder]:
        settings = self.settings_provider.get_settings()
        apex_start = settings.apex_hour_start(scheduled_time)
        threshold = apex_start - timedelta(minutes=SCHEDULING.close_to_apex_buffer_minutes)
        if scheduled_time <= threshold:
            return None
        return self._deliver(
            Reminder(
                id=REMINDER_IDS.deep_work_warning,
                title="Deep Work Scheduling Warning",
                body=(
                    f'Task "{task_title}" is scheduled close to your Apex Hour. '
                    "Consider moving it to earlier in the day for better energy management."
                ),
                fire_at=self.clock() + DEEP_WORK_WARNING_DELAY,
                channel="scheduling_warnings",
            )
        )

    def reschedule_all(self) -> List[Reminder]:
        self.notifier.cancel_all()
        planned = [self.schedule_apex_hour_reminder(), self.schedule_workday_end_reminder()]
        return [reminder for reminder in planned if reminder is not None]


__all__ = ["LoggingNotifier", "Notifier", "Reminder", "ReminderService"]
