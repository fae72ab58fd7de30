# services/settings_service.py
from __future__ import annotations

import json
from typing import Optional

from core.log import get_logger
from core.settings import KEYS
from models.user_settings import UserSettings
from storage.kv_store import KeyValueStore


logger = get_logger("settings")


class SettingsService:
    """Settings provider backed by the key-value store.

    Settings are cached after the first read; every write replaces the whole
    record.
    """

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store or KeyValueStore()
        self._cached: Optional[UserSettings] = None

    def get_settings(self) -> UserSettings:
        if self._cached is not None:
            return self._cached
        try:
            raw = self.store.get_json(KEYS.user_settings)
            settings = UserSettings.from_json(raw) if isinstance(raw, dict) else UserSettings()
        except (json.JSONDecodeError, TypeError, ValueError) as exc:
            logger.warning("Stored settings are unreadable, using defaults: %s", exc)
            settings = UserSettings()
        self._cached = settings
        return settings

    def save_settings(self, settings: UserSettings) -> UserSettings:
        self.store.set_json(KEYS.user_settings, settings.to_json())
        self._cached = settings
        logger.info(
            "Settings saved: workday %02d:%02d-%02d:%02d, Apex Hour %d min",
            settings.workday_start_hour,
            settings.workday_start_minute,
            settings.workday_end_hour,
            settings.workday_end_minute,
            settings.apex_hour_duration_minutes,
        )
        return settings

    def reset_settings(self) -> None:
        self.store.remove(KEYS.user_settings)
        self._cached = None

    def is_first_launch(self) -> bool:
        return not self.store.get_bool(KEYS.first_launch)

    def set_first_launch_complete(self) -> None:
        self.store.set_bool(KEYS.first_launch, True)

    # ---------- partial updates ----------
    def update_work_hours(
        self,
        *,
        start_hour: Optional[int] = None,
        start_minute: Optional[int] = None,
        end_hour: Optional[int] = None,
        end_minute: Optional[int] = None,
    ) -> UserSettings:
        updated = self.get_settings().copy_with(
            workday_start_hour=start_hour,
            workday_start_minute=start_minute,
            workday_end_hour=end_hour,
            workday_end_minute=end_minute,
        )
        return self.save_settings(updated)

    def update_apex_hour_duration(self, minutes: int) -> UserSettings:
        updated = self.get_settings().copy_with(apex_hour_duration_minutes=minutes)
        return self.save_settings(updated)

    def update_notification_settings(
        self,
        *,
        enabled: Optional[bool] = None,
        minutes_before: Optional[int] = None,
    ) -> UserSettings:
        updated = self.get_settings().copy_with(
            notifications_enabled=enabled,
            notification_minutes_before=minutes_before,
        )
        return self.save_settings(updated)

    def toggle_hard_stop(self) -> UserSettings:
        current = self.get_settings()
        return self.save_settings(current.copy_with(hard_stop_enabled=not current.hard_stop_enabled))


__all__ = ["SettingsService"]
