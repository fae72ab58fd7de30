"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import logging
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(env or os.environ)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(environ.get("APPDATA") or home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "ApexHour"


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

for _dir in (DATA_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "apexhour.db"
LOG_PATH = LOG_DIR / "apexhour.log"


@dataclass(frozen=True)
class SchedulingRules:
    """Business constants of the scheduler. Not exposed to the user."""

    slot_increment_minutes: int = 30
    close_to_apex_buffer_minutes: int = 60
    deep_work_morning_hours: int = 4
    shallow_work_optimal_from_hours: int = 2
    shallow_work_optimal_until_hours: int = 6
    wind_down_optimal_from_hours: int = 6
    alternate_date_lookahead_days: int = 7
    max_alternate_dates: int = 3
    default_max_suggestions: int = 3
    deep_work_suggestion_slots: int = 2
    default_estimated_minutes: int = 30


SCHEDULING = SchedulingRules()


@dataclass(frozen=True)
class LoggingSettings:
    logger_name: str = "apexhour"
    level: int = logging.INFO
    max_bytes: int = 1_000_000
    backup_count: int = 3
    log_path: Path = LOG_PATH


LOGGING = LoggingSettings()


@dataclass(frozen=True)
class StorageKeys:
    user_settings: str = "user_settings"
    first_launch: str = "first_launch"
    work_patterns: str = "work_patterns"


KEYS = StorageKeys()


@dataclass(frozen=True)
class ReminderIds:
    apex_hour: int = 1
    workday_end: int = 2
    deep_work_warning: int = 3


REMINDER_IDS = ReminderIds()


@dataclass(frozen=True)
class WorkPatternRules:
    """Completion history windows."""

    summary_days: int = 7
    retention_days: int = 30


WORK_PATTERNS = WorkPatternRules()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "LOG_DIR",
    "DB_PATH",
    "LOG_PATH",
    "SCHEDULING",
    "LOGGING",
    "KEYS",
    "REMINDER_IDS",
    "WORK_PATTERNS",
    "get_default_data_dir",
]
