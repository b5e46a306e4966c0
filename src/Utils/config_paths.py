"""
config_paths.py
Where the patcher keeps its own settings and log.

Follows the XDG Base Directory Specification:
  $XDG_CONFIG_HOME/AntiPower  (default: ~/.config/AntiPower)

Nothing here is ever written inside the Antigravity install.
"""

import os
from pathlib import Path

APP_NAME = "AntiPower"


def get_config_dir() -> Path:
    """Return the app config directory, creating it if it doesn't exist."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    config_dir = base / APP_NAME
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_app_config_path() -> Path:
    """Result: ~/.config/AntiPower/config.json"""
    return get_config_dir() / "config.json"


def get_log_path() -> Path:
    """Result: ~/.config/AntiPower/anti-power.log"""
    return get_config_dir() / "anti-power.log"
