# -*- coding: utf-8 -*-
import logging
from datetime import datetime

from .daily_scheduler import compute_schedule, format_schedule

logger = logging.getLogger(__name__)


class TriggerClock:
    """
    Holds today's triggers and decides, once per poll, whether one is due.

    ``load_alarms`` is called on every reschedule so edits saved through the
    store take effect the same day. ``presenter`` must provide ``is_active``
    and ``display(text)``; while it reports an active overlay nothing fires.
    """

    def __init__(self, load_alarms, presenter, rng=None, now_func=datetime.now):
        self.load_alarms = load_alarms
        self.presenter = presenter
        self.rng = rng
        self.now_func = now_func
        self.triggers = []
        self.schedule_date = None
        self._ticking = False

    def reschedule(self, now=None):
        """Replaces the whole trigger set with a fresh pass over the alarm list."""
        now = now or self.now_func()
        alarms = self.load_alarms()
        self.triggers = compute_schedule(alarms, now, self.rng)
        self.schedule_date = now.date()
        logger.info("Today's alarms (%s): %s", self.schedule_date, format_schedule(self.triggers))
        return self.triggers

    def needs_rollover(self, now):
        if now.hour == 0 and now.minute == 0:
            return True
        # Slept through midnight, the 00:00 tick never came
        return self.schedule_date is not None and now.date() != self.schedule_date

    def tick(self, now=None):
        """Runs one poll. Returns the trigger that fired, if any."""
        if self._ticking:
            logger.debug("Previous tick still running, skipping.")
            return None
        self._ticking = True
        try:
            return self._tick(now or self.now_func())
        finally:
            self._ticking = False

    def _tick(self, now):
        if self.needs_rollover(now):
            self.reschedule(now)
            return None

        if self.presenter.is_active:
            return None

        for trigger in self.triggers:
            if not trigger.fired and trigger.matches(now):
                trigger.mark_fired()
                logger.info("Firing alarm %d (set for %s) at %s: %s", trigger.alarm_id,
                            trigger.alarm.time_label, now.strftime('%H:%M'), trigger.alarm.text)
                try:
                    self.presenter.display(trigger.alarm.text)
                except Exception:
                    # No retry; the trigger stays fired
                    logger.exception("Failed to display overlay for alarm %d", trigger.alarm_id)
                return trigger
        return None

    def pending(self):
        return [t for t in self.triggers if not t.fired]
