import random
from datetime import datetime

from checkin_alarm.alarm_store import AlarmDefinition
from checkin_alarm.daily_scheduler import compute_schedule, format_schedule, jittered_minute


class FixedRng:
    """Always returns the same offset, clamped into the requested range."""
    def __init__(self, offset):
        self.offset = offset
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return max(a, min(b, self.offset))


def at(hour, minute):
    return datetime(2024, 5, 1, hour, minute, 0)


NINE = AlarmDefinition(1, 9, 0, 5, 'morning')


def test_trigger_within_window_before_alarm_time():
    rng = random.Random(1234)
    for _ in range(200):
        triggers = compute_schedule([NINE], at(8, 0), rng)
        assert len(triggers) == 1
        assert 535 <= triggers[0].minute_of_day <= 545
        assert triggers[0].fired is False
        assert triggers[0].alarm is NINE
        assert triggers[0].alarm_id == 1


def test_alarm_past_window_is_dropped():
    assert compute_schedule([NINE], at(9, 10), random.Random(0)) == []


def test_trigger_equal_to_now_is_dropped():
    triggers = compute_schedule([NINE], at(9, 0), FixedRng(0))
    assert triggers == []


def test_offset_drawn_from_symmetric_inclusive_range():
    rng = FixedRng(0)
    compute_schedule([NINE, AlarmDefinition(2, 15, 0, 0, 'x')], at(0, 1), rng)
    assert rng.calls == [(-5, 5), (0, 0)]


def test_fixed_offset_is_applied():
    triggers = compute_schedule([NINE], at(8, 0), FixedRng(-3))
    assert (triggers[0].trigger_hour, triggers[0].trigger_minute) == (8, 57)


def test_clamped_to_end_of_day():
    late = AlarmDefinition(1, 23, 58, 10, 'late')
    triggers = compute_schedule([late], at(12, 0), FixedRng(10))
    assert (triggers[0].trigger_hour, triggers[0].trigger_minute) == (23, 59)


def test_clamped_to_start_of_day():
    early = AlarmDefinition(1, 0, 3, 10, 'early')
    assert jittered_minute(early, FixedRng(-10)) == 0


def test_every_outcome_of_small_window_is_reachable():
    alarm = AlarmDefinition(1, 12, 0, 2, 'noon')
    rng = random.Random(42)
    seen = {jittered_minute(alarm, rng) for _ in range(500)}
    assert seen == {718, 719, 720, 721, 722}


def test_repeated_calls_rerandomize():
    alarm = AlarmDefinition(1, 12, 0, 30, 'noon')
    rng = random.Random(7)
    results = {compute_schedule([alarm], at(6, 0), rng)[0].minute_of_day for _ in range(50)}
    assert len(results) > 1


def test_output_keeps_input_order():
    alarms = [AlarmDefinition(2, 15, 0, 0, 'b'), AlarmDefinition(1, 10, 0, 0, 'a')]
    triggers = compute_schedule(alarms, at(6, 0), FixedRng(0))
    assert [t.alarm_id for t in triggers] == [2, 1]


def test_format_schedule():
    triggers = compute_schedule([NINE], at(8, 0), FixedRng(2))
    assert format_schedule(triggers) == '09:02 "morning"'
    assert format_schedule([]) == "(none)"
