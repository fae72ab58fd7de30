from datetime import timedelta

import pytest

from conftest import DAY, at, make_task
from core.categories import TaskCategory
from core.settings import KEYS
from models.kv_record import KVRecord
from models.work_pattern import WeeklyWorkSummary, WorkDayPattern
from services.work_patterns import WorkPatternService
from storage.kv_store import KeyValueStore


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture()
def store(session_factory):
    return KeyValueStore(session_factory)


@pytest.fixture()
def clock():
    return Clock(at(15))


@pytest.fixture()
def service(store, clock):
    return WorkPatternService(store, clock=clock)


def _complete(service, category, minutes=30):
    task = make_task(category, minutes=minutes)
    task.completed_at = service.clock()
    return service.record_task_completion(task)


def test_completions_are_grouped_by_day(service, clock):
    _complete(service, TaskCategory.DEEP_WORK, 120)
    _complete(service, TaskCategory.WIND_DOWN)
    clock.now = at(10, day=DAY + timedelta(days=1))
    _complete(service, TaskCategory.SHALLOW_WORK)

    first = service.get_work_pattern(DAY)
    assert first.completed_by_category == {
        TaskCategory.DEEP_WORK: 1,
        TaskCategory.SHALLOW_WORK: 0,
        TaskCategory.WIND_DOWN: 1,
    }
    assert [r.estimated_minutes for r in first.completions] == [120, 30]
    assert len(service.get_work_pattern(at(9, day=DAY + timedelta(days=1))).completions) == 1
    assert service.get_work_pattern(DAY - timedelta(days=1)) is None


def test_history_survives_a_new_service(service, store):
    _complete(service, TaskCategory.DEEP_WORK)
    reloaded = WorkPatternService(store, clock=service.clock).get_work_pattern(DAY)
    assert reloaded.completions[0].category is TaskCategory.DEEP_WORK
    assert reloaded.completions[0].completed_at == at(15)
    assert store.get_json(KEYS.work_patterns)[DAY.isoformat()]["completions"][0]["category"] == "deep_work"


def test_work_session_keeps_first_start(service):
    service.record_work_session(at(9))
    service.record_work_session(at(11), at(17, 30))
    pattern = service.get_work_pattern(DAY)
    assert pattern.work_start == at(9)
    assert pattern.work_end == at(17, 30)
    assert pattern.total_work_minutes == 8 * 60 + 30


def test_work_session_end_before_start_is_rejected():
    pattern = WorkDayPattern()
    pattern.record_work_session(at(9))
    with pytest.raises(ValueError):
        pattern.record_work_session(at(10), at(8))


def test_weekly_summary_covers_last_seven_days(service, clock):
    for offset, minutes in ((7, 600), (6, 480), (0, 360)):
        day = DAY - timedelta(days=offset)
        service.record_work_session(at(9, day=day), at(9, day=day) + timedelta(minutes=minutes))
        clock.now = at(12, day=day)
        _complete(service, TaskCategory.DEEP_WORK)
    clock.now = at(15)

    summary = service.get_weekly_summary()
    assert summary.total_work_days == 2
    assert summary.average_work_hours == pytest.approx(7.0)
    assert summary.completed_by_category[TaskCategory.DEEP_WORK] == 2
    assert summary.total_completed == 2


def test_empty_summary():
    summary = WeeklyWorkSummary.from_patterns({})
    assert summary.total_work_days == 0
    assert summary.average_work_hours == 0.0
    assert summary.total_completed == 0


def test_cleanup_drops_days_older_than_retention(service, clock):
    for offset in (31, 30, 29):
        clock.now = at(12, day=DAY - timedelta(days=offset))
        _complete(service, TaskCategory.SHALLOW_WORK)
    clock.now = at(15)

    assert service.cleanup_old_data() == 2
    assert service.get_work_pattern(DAY - timedelta(days=29)) is not None
    assert service.get_work_pattern(DAY - timedelta(days=30)) is None
    assert service.cleanup_old_data() == 0


def test_unreadable_history_starts_empty(service, store, session_factory):
    with session_factory() as session:
        session.add(KVRecord(key=KEYS.work_patterns, value_json="{broken"))
        session.commit()
    assert service.get_work_pattern(DAY) is None

    store.set_json(KEYS.work_patterns, {"not-a-date": {}, DAY.isoformat(): {"completions": []}})
    assert service.get_work_pattern(DAY).completions == []
