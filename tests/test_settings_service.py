import pytest

from core.settings import KEYS
from models.kv_record import KVRecord
from models.user_settings import UserSettings
from services.settings_service import SettingsService
from storage.kv_store import KeyValueStore


@pytest.fixture()
def store(session_factory):
    return KeyValueStore(session_factory)


def test_kv_store_roundtrip_and_remove(store):
    assert store.get_json("missing") is None
    store.set_json("k", {"a": 1, "b": [1, 2]})
    assert store.get_json("k") == {"a": 1, "b": [1, 2]}
    store.set_json("k", {"a": 2})
    assert store.get_json("k") == {"a": 2}
    store.remove("k")
    assert store.get_json("k") is None
    store.remove("k")


def test_kv_store_bool_default(store):
    assert store.get_bool("flag") is False
    assert store.get_bool("flag", default=True) is True
    store.set_bool("flag", True)
    assert store.get_bool("flag") is True


def test_defaults_when_nothing_stored(store):
    assert SettingsService(store).get_settings() == UserSettings()


def test_saved_settings_survive_a_new_service(store):
    SettingsService(store).save_settings(UserSettings(workday_end_hour=17, apex_hour_duration_minutes=45))
    reloaded = SettingsService(store).get_settings()
    assert reloaded.workday_end_hour == 17
    assert reloaded.apex_hour_duration_minutes == 45
    assert store.get_json(KEYS.user_settings)["workdayEndHour"] == 17


def test_partial_updates(store):
    service = SettingsService(store)
    service.update_work_hours(start_hour=8, end_hour=16, end_minute=30)
    service.update_apex_hour_duration(30)
    service.update_notification_settings(enabled=False, minutes_before=5)

    fresh = SettingsService(store).get_settings()
    assert (fresh.workday_start_hour, fresh.workday_start_minute) == (8, 0)
    assert (fresh.workday_end_hour, fresh.workday_end_minute) == (16, 30)
    assert fresh.apex_hour_duration_minutes == 30
    assert fresh.notifications_enabled is False
    assert fresh.notification_minutes_before == 5


def test_toggle_hard_stop(store):
    service = SettingsService(store)
    assert service.toggle_hard_stop().hard_stop_enabled is False
    assert service.toggle_hard_stop().hard_stop_enabled is True


def test_invalid_update_keeps_previous_settings(store):
    service = SettingsService(store)
    with pytest.raises(ValueError):
        service.update_apex_hour_duration(10 * 60)
    assert service.get_settings() == UserSettings()
    assert store.get_json(KEYS.user_settings) is None


def test_corrupt_record_falls_back_to_defaults(store, session_factory):
    with session_factory() as session:
        session.add(KVRecord(key=KEYS.user_settings, value_json="{not json"))
        session.commit()
    assert SettingsService(store).get_settings() == UserSettings()


def test_out_of_range_record_falls_back_to_defaults(store):
    store.set_json(KEYS.user_settings, {"workdayStartHour": 30})
    assert SettingsService(store).get_settings() == UserSettings()


def test_reset_settings(store):
    service = SettingsService(store)
    service.update_apex_hour_duration(90)
    service.reset_settings()
    assert service.get_settings() == UserSettings()


def test_first_launch_flag(store):
    service = SettingsService(store)
    assert service.is_first_launch() is True
    service.set_first_launch_complete()
    assert SettingsService(store).is_first_launch() is False


def test_record_timestamps_are_naive(store, session_factory):
    store.set_json("k", 1)
    store.set_json("k", 2)
    with session_factory() as session:
        row = session.get(KVRecord, "k")
    assert row.updated_at.tzinfo is None
