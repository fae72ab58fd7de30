from datetime import timedelta

import pytest

from conftest import DAY, at, make_task
from core.categories import TaskCategory
from datetime_utils import intervals_overlap
from services.slot_finder import find_available_time_slots, is_optimal_time, iter_free_slots


DEEP = TaskCategory.DEEP_WORK
SHALLOW = TaskCategory.SHALLOW_WORK
WIND_DOWN = TaskCategory.WIND_DOWN


def test_empty_day_deep_work_first_three_slots(settings):
    slots = find_available_time_slots(DEEP, 60, DAY, settings, [], max_suggestions=3)
    assert [(s.start, s.end) for s in slots] == [
        (at(9), at(10)),
        (at(9, 30), at(10, 30)),
        (at(10), at(11)),
    ]
    assert all(s.is_optimal for s in slots)


def test_accepts_timedelta_duration(settings):
    by_minutes = find_available_time_slots(DEEP, 45, DAY, settings, [])
    by_delta = find_available_time_slots(DEEP, timedelta(minutes=45), DAY, settings, [])
    assert by_minutes == by_delta
    assert by_minutes[0].end == at(9, 45)


def test_busy_intervals_are_skipped(settings):
    busy = [
        make_task(SHALLOW, at(9), at(10), title="Standup"),
        make_task(DEEP, at(10, 30), at(11, 30), title="Review"),
    ]
    slots = find_available_time_slots(SHALLOW, 30, DAY, settings, busy, max_suggestions=50)
    for slot in slots:
        for task in busy:
            assert not intervals_overlap(slot.start, slot.end, task.scheduled_start, task.scheduled_end)
    starts = {slot.start for slot in slots}
    assert at(10) in starts
    assert at(9) not in starts and at(10, 30) not in starts


def test_unscheduled_tasks_do_not_block(settings):
    loose = make_task(SHALLOW, at(9), None)
    slots = find_available_time_slots(DEEP, 60, DAY, settings, [loose], max_suggestions=1)
    assert slots[0].start == at(9)


def test_excluded_task_does_not_block(settings):
    own = make_task(DEEP, at(9), at(10), task_id="own")
    slots = find_available_time_slots(DEEP, 60, DAY, settings, [own], max_suggestions=1, exclude_task_id="own")
    assert slots[0].start == at(9)


@pytest.mark.parametrize("limit", [0, 1, 2, 5])
def test_never_more_than_max_suggestions(settings, limit):
    slots = find_available_time_slots(SHALLOW, 30, DAY, settings, [], max_suggestions=limit)
    assert len(slots) == limit


def test_non_wind_down_slots_stay_out_of_apex_hour(settings):
    slots = find_available_time_slots(SHALLOW, 60, DAY, settings, [], max_suggestions=100)
    assert len(slots) == 15
    assert max(slot.end for slot in slots) == at(17)


def test_wind_down_may_use_apex_hour_up_to_workday_end(settings):
    slots = find_available_time_slots(WIND_DOWN, 60, DAY, settings, [], max_suggestions=100)
    assert len(slots) == 17
    ends = {slot.end for slot in slots}
    assert at(18) in ends
    assert all(slot.end <= at(18) for slot in slots)


def test_optimal_slots_first_then_by_start(settings):
    slots = find_available_time_slots(WIND_DOWN, 60, DAY, settings, [], max_suggestions=100)
    assert [s.start for s in slots[:5]] == [at(15), at(15, 30), at(16), at(16, 30), at(17)]
    assert all(s.is_optimal for s in slots[:5])
    assert slots[5].start == at(9)
    assert not any(s.is_optimal for s in slots[5:])
    assert [s.start for s in slots[5:]] == sorted(s.start for s in slots[5:])


def test_limit_applies_to_scan_order_before_sorting(settings):
    # the first four eligible Shallow Work slots are 9:00-10:30; only 11:00+ is optimal
    slots = find_available_time_slots(SHALLOW, 30, DAY, settings, [], max_suggestions=4)
    assert [s.start for s in slots] == [at(9), at(9, 30), at(10), at(10, 30)]
    assert not any(s.is_optimal for s in slots)


def test_full_day_yields_nothing(settings):
    blocker = make_task(SHALLOW, at(9), at(18))
    assert find_available_time_slots(WIND_DOWN, 30, DAY, settings, [blocker]) == []


def test_duration_longer_than_workday_yields_nothing(settings):
    assert find_available_time_slots(WIND_DOWN, 10 * 60, DAY, settings, []) == []


def test_repeated_calls_are_identical(settings):
    busy = [make_task(SHALLOW, at(11), at(12, 30))]
    first = find_available_time_slots(DEEP, 90, DAY, settings, busy, max_suggestions=6)
    second = find_available_time_slots(DEEP, 90, DAY, settings, busy, max_suggestions=6)
    assert first == second


def test_iterator_is_lazy_and_restartable(settings):
    slots = iter_free_slots(DEEP, 60, DAY, settings, [])
    assert next(slots).start == at(9)
    assert next(slots).start == at(9, 30)
    again = iter_free_slots(DEEP, 60, DAY, settings, [])
    assert next(again).start == at(9)


@pytest.mark.parametrize("duration", [0, -30, timedelta(0)])
def test_non_positive_duration_rejected(settings, duration):
    with pytest.raises(ValueError):
        find_available_time_slots(DEEP, duration, DAY, settings, [])


def test_negative_limit_rejected(settings):
    with pytest.raises(ValueError):
        find_available_time_slots(DEEP, 30, DAY, settings, [], max_suggestions=-1)


@pytest.mark.parametrize(
    "category,start,expected",
    [
        (DEEP, at(9), True),
        (DEEP, at(12, 59), True),
        (DEEP, at(13), False),
        (SHALLOW, at(10, 59), False),
        (SHALLOW, at(11), True),
        (SHALLOW, at(14, 59), True),
        (SHALLOW, at(15), False),
        (WIND_DOWN, at(14, 59), False),
        (WIND_DOWN, at(15), True),
    ],
)
def test_optimality_windows(settings, category, start, expected):
    assert is_optimal_time(category, start, settings) is expected
