"""
Tests for the event status engine.
"""
from datetime import timedelta

from eventportal.core.event_status import (
    EventState, EventStatus, compute_status, format_remaining, is_settled, split_tabs
)


def test_before_start_is_upcoming(fixed_now):
    status = compute_status(fixed_now + timedelta(hours=1), fixed_now + timedelta(hours=2), fixed_now)
    assert status == EventStatus(EventState.UPCOMING, None)


def test_start_instant_is_ongoing(fixed_now):
    status = compute_status(fixed_now, fixed_now + timedelta(minutes=30), fixed_now)
    assert status.state is EventState.ONGOING
    assert status.remaining == '00:30:00'


def test_ongoing_scenario(fixed_now):
    status = compute_status(fixed_now - timedelta(minutes=10), fixed_now + timedelta(minutes=5), fixed_now)
    assert status.state is EventState.ONGOING
    assert status.remaining == '00:05:00'


def test_end_instant_is_finished(fixed_now):
    status = compute_status(fixed_now - timedelta(hours=1), fixed_now, fixed_now)
    assert status == EventStatus(EventState.FINISHED, None)


def test_finished_scenario(fixed_now):
    status = compute_status(fixed_now - timedelta(hours=1), fixed_now - timedelta(seconds=1), fixed_now)
    assert status.state is EventState.FINISHED
    assert status.remaining is None


def test_missing_times_is_info_missing(fixed_now):
    assert compute_status(None, fixed_now, fixed_now).state is EventState.INFO_MISSING
    assert compute_status(fixed_now, None, fixed_now).state is EventState.INFO_MISSING
    assert compute_status(None, None, fixed_now).remaining is None


def test_same_inputs_same_result(fixed_now):
    start, end = fixed_now - timedelta(minutes=1), fixed_now + timedelta(seconds=75)
    assert compute_status(start, end, fixed_now) == compute_status(start, end, fixed_now)


def test_remaining_is_floored_and_zero_padded():
    assert format_remaining(3725.9) == '01:02:05'
    assert format_remaining(0.5) == '00:00:00'
    assert format_remaining(100 * 3600) == '100:00:00'


def test_settled_states():
    assert is_settled(EventStatus(EventState.FINISHED))
    assert is_settled(EventStatus(EventState.INFO_MISSING))
    assert not is_settled(EventStatus(EventState.ONGOING, '00:00:01'))
    assert not is_settled(EventStatus(EventState.UPCOMING))


def test_split_tabs_keeps_order():
    tagged = [
        {'id': 1, 'status': 'Finished'},
        {'id': 2, 'status': 'Upcoming'},
        {'id': 3, 'status': 'InfoMissing'},
        {'id': 4, 'status': 'Ongoing'},
        {'id': 5, 'status': 'Finished'},
    ]
    tabs = split_tabs(tagged)
    assert [t['id'] for t in tabs['upcoming']] == [2, 3, 4]
    assert [t['id'] for t in tabs['finished']] == [1, 5]


def test_status_to_dict():
    assert EventStatus(EventState.ONGOING, '00:00:09').to_dict() == {
        'status': 'Ongoing', 'remaining': '00:00:09'
    }
