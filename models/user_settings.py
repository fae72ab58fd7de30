"""User-configured work hours and reminder preferences."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date, datetime, timedelta
from typing import Any, Dict, Mapping, Tuple

from datetime_utils import at_clock


# Persisted key -> attribute name. Keys follow the stored record format.
_JSON_KEYS: Dict[str, str] = {
    "workdayStartHour": "workday_start_hour",
    "workdayStartMinute": "workday_start_minute",
    "workdayEndHour": "workday_end_hour",
    "workdayEndMinute": "workday_end_minute",
    "apexHourDurationMinutes": "apex_hour_duration_minutes",
    "notificationMinutesBefore": "notification_minutes_before",
    "notificationsEnabled": "notifications_enabled",
    "hardStopEnabled": "hard_stop_enabled",
    "timezone": "timezone",
}


@dataclass(frozen=True)
class UserSettings:
    """Workday boundaries and the protected Apex Hour before the end of the day.

    The Apex Hour window is ``[workday_end - apex_hour_duration, workday_end]``
    and always lies inside the workday; construction fails otherwise.
    """

    workday_start_hour: int = 9
    workday_start_minute: int = 0
    workday_end_hour: int = 18
    workday_end_minute: int = 0
    apex_hour_duration_minutes: int = 60
    notification_minutes_before: int = 15
    notifications_enabled: bool = True
    hard_stop_enabled: bool = True
    timezone: str = "local"

    def __post_init__(self) -> None:
        for name in ("workday_start_hour", "workday_end_hour"):
            value = getattr(self, name)
            if not 0 <= value <= 23:
                raise ValueError(f"{name} must be between 0 and 23, got {value}")
        for name in ("workday_start_minute", "workday_end_minute"):
            value = getattr(self, name)
            if not 0 <= value <= 59:
                raise ValueError(f"{name} must be between 0 and 59, got {value}")
        if self.workday_minutes <= 0:
            raise ValueError("Workday end must be after workday start")
        if not 0 <= self.apex_hour_duration_minutes <= self.workday_minutes:
            raise ValueError(
                "Apex Hour duration must be between 0 and the workday length "
                f"({self.workday_minutes} minutes)"
            )
        if self.notification_minutes_before < 0:
            raise ValueError("Notification lead time cannot be negative")

    @property
    def workday_minutes(self) -> int:
        start = self.workday_start_hour * 60 + self.workday_start_minute
        end = self.workday_end_hour * 60 + self.workday_end_minute
        return end - start

    # ---------- time windows ----------
    def workday_start(self, day: date | datetime) -> datetime:
        return at_clock(day, self.workday_start_hour, self.workday_start_minute)

    def workday_end(self, day: date | datetime) -> datetime:
        return at_clock(day, self.workday_end_hour, self.workday_end_minute)

    def apex_hour_start(self, day: date | datetime) -> datetime:
        return self.workday_end(day) - timedelta(minutes=self.apex_hour_duration_minutes)

    def apex_hour_window(self, day: date | datetime) -> Tuple[datetime, datetime]:
        return self.apex_hour_start(day), self.workday_end(day)

    def is_apex_hour(self, now: datetime) -> bool:
        apex_start, apex_end = self.apex_hour_window(now)
        return apex_start < now < apex_end

    def is_past_workday(self, now: datetime) -> bool:
        return now > self.workday_end(now)

    # ---------- persistence ----------
    def copy_with(self, **changes: Any) -> "UserSettings":
        updates = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **updates)

    def to_json(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for key, attr in _JSON_KEYS.items()}

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "UserSettings":
        known = {f.name for f in fields(cls)}
        kwargs = {
            attr: data[key]
            for key, attr in _JSON_KEYS.items()
            if attr in known and data.get(key) is not None
        }
        return cls(**kwargs)


__all__ = ["UserSettings"]
