# config_manager.py
import json
import logging
from pathlib import Path

config_json = Path(__file__).resolve().parent.parent / "config.json"
ui_strings = Path(__file__).resolve().parent.parent / "ui_strings.json"

logger = logging.getLogger(__name__)

# Used for every key that is missing in config.json (or when the file is missing / broken)
DEFAULT_SETTINGS = {
    "decimal_places": 10,
    "fractions": False,
    "degrees": False,
    "darkmode": False,
    "show_equation": True,
    "debug": False,
}

# Range accepted for "decimal_places"
MIN_DECIMAL_PLACES = 2
MAX_DECIMAL_PLACES = 100


def load_setting_value(key_value, path=None):
    """Return one setting, or the merged settings dict for key_value == "all"."""
    settings_dict = dict(DEFAULT_SETTINGS)
    try:
        with open(path or config_json, 'r', encoding='utf-8') as f:
            settings_dict.update(json.load(f))

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not read settings (%s), using defaults.", e)

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value, path=None):
    try:
        with open(path or ui_strings, 'r', encoding='utf-8') as f:
            settings_dict = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError):
        return {}

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def save_setting(settings_dict, path=None):
    """Write `settings_dict` to config.json; returns it, or {} when the file cannot be written."""
    try:
        with open(path or config_json, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except OSError as e:
        logger.error("Settings could not be saved: %s", e)
        return {}
