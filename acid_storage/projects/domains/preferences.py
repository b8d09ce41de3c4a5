"""Persistent user preferences for acid-storage.

Stored as JSON under the XDG config directory:
~/.config/acid-storage/preferences.json
"""
import json
from pathlib import Path
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

PREFERENCES_DIR = Path.home() / ".config" / "acid-storage"
PREFERENCES_FILE = PREFERENCES_DIR / "preferences.json"


def _load_preferences() -> Dict[str, Any]:
    """
    Read the preferences file.

    A missing or unreadable file yields an empty dict so that lookups fall
    through to the default config location.
    """
    if not PREFERENCES_FILE.exists():
        return {}

    try:
        with open(PREFERENCES_FILE, 'r') as f:
            preferences = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Ignoring unreadable preferences file {PREFERENCES_FILE}: {e}")
        return {}

    if not isinstance(preferences, dict):
        logger.error(f"Ignoring preferences file {PREFERENCES_FILE}: not a JSON object")
        return {}
    return preferences


def _save_preferences(preferences: Dict[str, Any]) -> None:
    PREFERENCES_DIR.mkdir(parents=True, exist_ok=True)
    with open(PREFERENCES_FILE, 'w') as f:
        json.dump(preferences, f, indent=2)


def get_preference(key: str) -> Optional[str]:
    """Return the stored preference for key, or None."""
    return _load_preferences().get(key)


def set_preference(key: str, value: str) -> None:
    """
    Store a preference value, replacing any previous one.

    Args:
        key: Preference key (e.g. "config_path")
        value: Value to persist
    """
    preferences = _load_preferences()
    preferences[key] = value
    _save_preferences(preferences)
    logger.info(f"Preference '{key}' set to: {value}")


def clear_preference(key: str) -> None:
    """Remove a preference; clearing an unset key is a no-op."""
    preferences = _load_preferences()
    if key not in preferences:
        logger.debug(f"Preference '{key}' not set, nothing to clear")
        return
    del preferences[key]
    _save_preferences(preferences)
    logger.info(f"Preference '{key}' cleared")
