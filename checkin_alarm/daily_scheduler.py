# -*- coding: utf-8 -*-
"""Turns the alarm list into today's randomized firing schedule."""
import random
from dataclasses import dataclass

from .alarm_store import AlarmDefinition

LAST_MINUTE_OF_DAY = 23 * 60 + 59

_default_rng = random.Random()


@dataclass
class ScheduledTrigger:
    alarm_id: int
    trigger_hour: int
    trigger_minute: int
    alarm: AlarmDefinition
    fired: bool = False

    @property
    def minute_of_day(self):
        return self.trigger_hour * 60 + self.trigger_minute

    def matches(self, now):
        return self.trigger_hour == now.hour and self.trigger_minute == now.minute

    def mark_fired(self):
        self.fired = True

    def __str__(self):
        return f'{self.trigger_hour:02d}:{self.trigger_minute:02d} "{self.alarm.text}"'


def jittered_minute(alarm, rng):
    """Minute of day for one alarm, shifted by a uniform draw from [-window, +window]."""
    window = max(0, alarm.window_minutes)
    offset = rng.randint(-window, window)
    total_minutes = alarm.hour * 60 + alarm.minute + offset
    return max(0, min(LAST_MINUTE_OF_DAY, total_minutes))


def compute_schedule(alarms, now, rng=None):
    """
    Computes one trigger per alarm for the rest of today.

    Every call draws fresh offsets, so callers should run it once per day
    (and again only when the alarm list changes). Triggers whose time is not
    strictly after ``now`` are dropped, not moved to tomorrow.
    """
    rng = rng or _default_rng
    current_minute = now.hour * 60 + now.minute

    triggers = []
    for alarm in alarms:
        trigger_hour, trigger_minute = divmod(jittered_minute(alarm, rng), 60)
        trigger = ScheduledTrigger(alarm.id, trigger_hour, trigger_minute, alarm)
        if trigger.minute_of_day > current_minute:
            triggers.append(trigger)
    return triggers


def format_schedule(triggers):
    return ", ".join(str(t) for t in triggers) or "(none)"
