# -*- coding: utf-8 -*-
"""Persistence of the alarm list (alarms.json)."""
import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

ALARMS_FILENAME = 'alarms.json'


class ConfigReadError(Exception):
    """The persisted alarm list is missing or cannot be parsed."""


class InvalidAlarmDefinition(ValueError):
    """An alarm record has out-of-range or malformed fields."""


@dataclass(frozen=True)
class AlarmDefinition:
    id: int
    hour: int
    minute: int
    window_minutes: int
    text: str = ''

    @classmethod
    def from_dict(cls, data, clamp_window=False):
        """Builds a definition from a JSON record, raising InvalidAlarmDefinition."""
        if not isinstance(data, dict):
            raise InvalidAlarmDefinition(f"expected an object, got {type(data).__name__}")
        try:
            alarm_id = _as_int(data['id'])
            hour = _as_int(data['hour'])
            minute = _as_int(data['minute'])
            window = _as_int(data.get('windowMinutes', 0))
        except KeyError as e:
            raise InvalidAlarmDefinition(f"missing field {e}") from None
        if clamp_window and window < 0:
            logger.warning("Alarm %d has negative windowMinutes %d, clamping to 0.", alarm_id, window)
            window = 0
        text = data.get('text', '')
        if not isinstance(text, str):
            text = str(text)
        alarm = cls(alarm_id, hour, minute, window, text)
        alarm.validate()
        return alarm

    def to_dict(self):
        return {
            'id': self.id,
            'hour': self.hour,
            'minute': self.minute,
            'windowMinutes': self.window_minutes,
            'text': self.text,
        }

    def validate(self):
        if not 0 <= self.hour <= 23:
            raise InvalidAlarmDefinition(f"hour {self.hour} out of range 0-23")
        if not 0 <= self.minute <= 59:
            raise InvalidAlarmDefinition(f"minute {self.minute} out of range 0-59")
        if self.window_minutes < 0:
            raise InvalidAlarmDefinition(f"windowMinutes {self.window_minutes} is negative")

    @property
    def time_label(self):
        return f"{self.hour:02d}:{self.minute:02d}"


DEFAULT_ALARMS = (
    AlarmDefinition(1, 9, 0, 5, '午前のチェックイン'),
    AlarmDefinition(2, 11, 50, 5, 'ランチ前の確認'),
    AlarmDefinition(3, 15, 0, 5, '午後のチェックイン'),
    AlarmDefinition(4, 17, 45, 5, '業務終了の確認'),
)


def _as_int(value):
    # JSON true/false would otherwise pass as 1/0
    if isinstance(value, bool):
        raise InvalidAlarmDefinition(f"expected an integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidAlarmDefinition(f"expected an integer, got {value!r}")


def sanitize_alarms(records):
    """
    Turns raw JSON records into valid AlarmDefinitions.

    Negative windows are clamped to 0, duplicate ids get the next free id,
    anything else malformed is dropped with a warning.
    """
    alarms = []
    seen_ids = set()
    for index, record in enumerate(records):
        try:
            alarm = AlarmDefinition.from_dict(record, clamp_window=True)
        except InvalidAlarmDefinition as e:
            logger.warning("Skipping alarm record %d: %s", index, e)
            continue
        alarms.append(alarm)

    result = []
    next_id = max((a.id for a in alarms), default=0) + 1
    for alarm in alarms:
        if alarm.id in seen_ids:
            logger.warning("Duplicate alarm id %d, reassigning to %d.", alarm.id, next_id)
            alarm = AlarmDefinition(next_id, alarm.hour, alarm.minute, alarm.window_minutes, alarm.text)
            next_id += 1
        seen_ids.add(alarm.id)
        result.append(alarm)
    return result


class AlarmStore:
    """Loads and saves the alarm list in a JSON file inside the config directory."""

    def __init__(self, config_dir):
        self.path = Path(config_dir) / ALARMS_FILENAME

    def _read_records(self):
        if not self.path.exists():
            raise ConfigReadError(f"{self.path} does not exist")
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                loaded_data = json.load(f)
        except (ValueError, RecursionError, OSError) as e:
            raise ConfigReadError(f"failed to read {self.path}: {e}") from e
        if not isinstance(loaded_data, list):
            raise ConfigReadError(f"{self.path} format invalid (expected a list)")
        return loaded_data

    def get_alarms(self):
        """Returns the persisted alarms, or the built-in defaults if there are none."""
        if not self.path.exists():
            logger.info("No alarm list at %s, writing defaults.", self.path)
            self._write(DEFAULT_ALARMS)
            return list(DEFAULT_ALARMS)
        try:
            records = self._read_records()
        except ConfigReadError as e:
            logger.warning("%s. Using default alarms.", e)
            return list(DEFAULT_ALARMS)
        alarms = sanitize_alarms(records)
        logger.debug("Loaded %d alarms from %s", len(alarms), self.path)
        return alarms

    def save_alarms(self, alarms):
        """Validates and writes the whole list. Returns False if nothing was written."""
        alarms = list(alarms)
        ids = set()
        for alarm in alarms:
            try:
                alarm.validate()
            except InvalidAlarmDefinition as e:
                logger.warning("Refusing to save alarm %s: %s", alarm.id, e)
                return False
            if alarm.id in ids:
                logger.warning("Refusing to save: duplicate alarm id %s", alarm.id)
                return False
            ids.add(alarm.id)
        return self._write(alarms)

    def _write(self, alarms):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump([a.to_dict() for a in alarms], f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            logger.warning("Failed to save alarms to %s: %s", self.path, e)
            return False
        logger.info("Saved %d alarms to %s", len(alarms), self.path)
        return True
