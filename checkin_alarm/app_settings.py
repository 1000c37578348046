# -*- coding: utf-8 -*-
import json
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "CheckinAlarm"

DEFAULT_SETTINGS = {
    'poll_interval_seconds': 30,
    'log_level': 'INFO',
}

# --- Helper Function for Configuration Path ---
def resource_path(relative_path):
    """ Get absolute path to resource, works for dev and for PyInstaller """
    # PyInstaller unpacks bundled data into sys._MEIPASS
    base_path = getattr(sys, '_MEIPASS', os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_path, relative_path)

def get_config_dir(override=None):
    """Gets the application's configuration directory path."""
    if override:
        config_dir = Path(override)
    elif sys.platform == "win32":
        app_data_dir = os.getenv('LOCALAPPDATA')
        if not app_data_dir:
             app_data_dir = Path.home()
        config_dir = Path(app_data_dir) / APP_NAME
    else: # Linux/macOS
        config_dir = Path.home() / ".config" / APP_NAME

    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Error creating config directory %s: %s", config_dir, e)
        return Path(".") # Fallback to current directory
    return config_dir

# --- Settings Loading/Saving ---
def load_settings(config_dir):
    """Reads settings.json, falling back to defaults key by key."""
    settings_path = Path(config_dir) / 'settings.json'
    valid_settings = DEFAULT_SETTINGS.copy()
    if not settings_path.exists():
        logger.info("Settings file not found at %s. Writing defaults.", settings_path)
        save_settings(config_dir, valid_settings)
        return valid_settings

    try:
        with open(settings_path, 'r', encoding='utf-8') as f:
            settings_loaded = json.load(f)
    except (ValueError, RecursionError, OSError) as e:
        logger.warning("Failed to load settings from %s: %s. Using defaults.", settings_path, e)
        return valid_settings
    if not isinstance(settings_loaded, dict):
        logger.warning("settings.json format invalid (expected an object). Using defaults.")
        return valid_settings

    for key, default_value in DEFAULT_SETTINGS.items():
        loaded_value = settings_loaded.get(key)
        if loaded_value is None:
            continue
        # bool is an int subclass; reject it for numeric keys
        if isinstance(loaded_value, type(default_value)) and not isinstance(loaded_value, bool):
            valid_settings[key] = loaded_value
        else:
            logger.warning("Type mismatch for '%s' in settings.json, using default.", key)

    # A poll interval of a minute or more could step over a whole minute
    interval = valid_settings['poll_interval_seconds']
    if not 1 <= interval <= 59:
        logger.warning("poll_interval_seconds=%s out of range 1-59, using default.", interval)
        valid_settings['poll_interval_seconds'] = DEFAULT_SETTINGS['poll_interval_seconds']

    if not isinstance(logging.getLevelName(valid_settings['log_level'].upper()), int):
        logger.warning("Unknown log_level '%s', using default.", valid_settings['log_level'])
        valid_settings['log_level'] = DEFAULT_SETTINGS['log_level']

    logger.debug("Loaded settings from %s", settings_path)
    return valid_settings

def save_settings(config_dir, settings):
    settings_path = Path(config_dir) / 'settings.json'
    try:
        with open(settings_path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=4, ensure_ascii=False)
        return True
    except OSError as e:
        logger.warning("Failed to save settings to %s: %s", settings_path, e)
        return False
