import json

from checkin_alarm.app_settings import DEFAULT_SETTINGS, get_config_dir, load_settings


def test_missing_settings_written_with_defaults(tmp_path):
    settings = load_settings(tmp_path)
    assert settings == DEFAULT_SETTINGS
    assert json.loads((tmp_path / 'settings.json').read_text(encoding='utf-8')) == DEFAULT_SETTINGS


def test_valid_values_are_kept(tmp_path):
    (tmp_path / 'settings.json').write_text(json.dumps({'poll_interval_seconds': 15, 'log_level': 'debug'}))
    settings = load_settings(tmp_path)
    assert settings['poll_interval_seconds'] == 15
    assert settings['log_level'] == 'debug'


def test_bad_values_fall_back(tmp_path):
    (tmp_path / 'settings.json').write_text(json.dumps({'poll_interval_seconds': 90, 'log_level': 'LOUD'}))
    assert load_settings(tmp_path) == DEFAULT_SETTINGS


def test_type_mismatch_falls_back(tmp_path):
    (tmp_path / 'settings.json').write_text(json.dumps({'poll_interval_seconds': "30", 'log_level': 3}))
    assert load_settings(tmp_path) == DEFAULT_SETTINGS


def test_corrupt_settings_file(tmp_path):
    (tmp_path / 'settings.json').write_text("[[")
    assert load_settings(tmp_path) == DEFAULT_SETTINGS


def test_config_dir_override_is_created(tmp_path):
    target = tmp_path / 'nested' / 'dir'
    assert get_config_dir(target) == target
    assert target.is_dir()


def test_config_dir_defaults_under_home(tmp_path, monkeypatch):
    monkeypatch.setattr('sys.platform', 'linux')
    monkeypatch.setenv('HOME', str(tmp_path))
    assert get_config_dir() == tmp_path / '.config' / 'CheckinAlarm'


def test_invalid_utf8_settings_file(tmp_path):
    (tmp_path / 'settings.json').write_bytes(b'{"log_level": "\xff\xfe"}')
    assert load_settings(tmp_path) == DEFAULT_SETTINGS


def test_deeply_nested_settings_file(tmp_path):
    (tmp_path / 'settings.json').write_text('[' * 100000)
    assert load_settings(tmp_path) == DEFAULT_SETTINGS
