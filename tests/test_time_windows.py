from datetime import datetime

import pytest

from conftest import DAY, at
from datetime_utils import format_clock, intervals_overlap
from models.user_settings import UserSettings


def test_default_windows(settings):
    assert settings.workday_start(DAY) == at(9)
    assert settings.workday_end(DAY) == at(18)
    assert settings.apex_hour_start(DAY) == at(17)
    assert settings.apex_hour_window(DAY) == (at(17), at(18))


def test_windows_use_date_of_datetime_argument(settings):
    assert settings.apex_hour_start(at(23, 59)) == at(17)
    assert settings.workday_start(datetime(2024, 3, 5, 1, 0)) == datetime(2024, 3, 5, 9, 0)


def test_custom_apex_duration_and_minutes():
    settings = UserSettings(
        workday_start_hour=8,
        workday_start_minute=30,
        workday_end_hour=16,
        workday_end_minute=45,
        apex_hour_duration_minutes=90,
    )
    assert settings.workday_start(DAY) == at(8, 30)
    assert settings.apex_hour_start(DAY) == at(15, 15)


def test_is_apex_hour_and_past_workday(settings):
    assert settings.is_apex_hour(at(17, 30))
    assert not settings.is_apex_hour(at(17))
    assert not settings.is_apex_hour(at(16, 59))
    assert settings.is_past_workday(at(18, 1))
    assert not settings.is_past_workday(at(18))


@pytest.mark.parametrize(
    "changes",
    [
        {"workday_start_hour": 24},
        {"workday_end_minute": 60},
        {"workday_start_hour": 18, "workday_end_hour": 9},
        {"apex_hour_duration_minutes": -1},
        {"apex_hour_duration_minutes": 9 * 60 + 1},
        {"notification_minutes_before": -5},
    ],
)
def test_invalid_settings_rejected(changes):
    with pytest.raises(ValueError):
        UserSettings(**changes)


def test_apex_hour_may_fill_whole_workday():
    settings = UserSettings(apex_hour_duration_minutes=9 * 60)
    assert settings.apex_hour_start(DAY) == settings.workday_start(DAY)


def test_json_uses_stored_keys_and_defaults_missing_values():
    settings = UserSettings(workday_end_hour=17, hard_stop_enabled=False)
    payload = settings.to_json()
    assert payload["workdayEndHour"] == 17
    assert payload["hardStopEnabled"] is False
    assert UserSettings.from_json(payload) == settings

    partial = UserSettings.from_json({"apexHourDurationMinutes": 45})
    assert partial.apex_hour_duration_minutes == 45
    assert partial.workday_start_hour == 9
    assert partial.notification_minutes_before == 15


def test_copy_with_ignores_none():
    settings = UserSettings()
    updated = settings.copy_with(workday_end_hour=19, workday_end_minute=None)
    assert updated.workday_end_hour == 19
    assert updated.workday_end_minute == 0
    assert settings.workday_end_hour == 18


def test_overlap_is_half_open_and_symmetric():
    assert not intervals_overlap(at(9), at(10), at(10), at(11))
    assert not intervals_overlap(at(10), at(11), at(9), at(10))
    assert intervals_overlap(at(9), at(10, 1), at(10), at(11))
    assert intervals_overlap(at(10), at(11), at(9), at(10, 1))


def test_format_clock():
    assert format_clock(at(17)) == "5:00 PM"
    assert format_clock(at(0, 5)) == "12:05 AM"
    assert format_clock(at(12, 30)) == "12:30 PM"
    assert format_clock(datetime(2024, 1, 1, 9, 0)) == "9:00 AM"
