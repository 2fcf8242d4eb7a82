"""
Settings persistence for the server manager.

Settings live in a single JSON file under the data directory. Missing or
unreadable files fall back to DEFAULT_SETTINGS; unknown keys are ignored.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Data directory (override with SSM_DATA_DIR)
DATA_DIR = os.environ.get(
    "SSM_DATA_DIR",
    os.path.expanduser("~/.local/share/steam-server-manager"),
)
SETTINGS_PATH = os.path.join(DATA_DIR, "settings.json")
LOG_FILE = os.path.join(DATA_DIR, "server-manager.log")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "backup_path": None,
    "log_level": "INFO",
    # Seconds to let Steam apply an update before re-reading the build id
    "update_wait_seconds": 10,
    # Total timeout for the cover art existence check
    "cover_art_timeout": 10,
    # None = external commands are awaited without a bound
    "command_timeout": None,
}


def load_settings(path: Optional[str] = None) -> Dict[str, Any]:
    """Load settings, merged over the defaults."""
    path = path or SETTINGS_PATH
    settings = dict(DEFAULT_SETTINGS)
    try:
        if os.path.exists(path):
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if isinstance(data, dict):
                settings.update({k: data[k] for k in DEFAULT_SETTINGS if k in data})
    except (OSError, ValueError) as e:
        logger.warning(f"[Settings] Could not read {path}, using defaults: {e}")
    return settings


def save_settings(settings: Dict[str, Any], path: Optional[str] = None) -> bool:
    """Write settings to disk. Returns False on I/O failure."""
    path = path or SETTINGS_PATH
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        data = {k: settings.get(k, v) for k, v in DEFAULT_SETTINGS.items()}
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        logger.debug(f"[Settings] Saved settings to {path}")
        return True
    except OSError as e:
        logger.error(f"[Settings] Error saving settings: {e}")
        return False


def get_setting(key: str, path: Optional[str] = None) -> Any:
    return load_settings(path).get(key, DEFAULT_SETTINGS.get(key))


def set_setting(key: str, value: Any, path: Optional[str] = None) -> bool:
    if key not in DEFAULT_SETTINGS:
        raise KeyError(f"Unknown setting: {key}")
    settings = load_settings(path)
    settings[key] = value
    return save_settings(settings, path)
