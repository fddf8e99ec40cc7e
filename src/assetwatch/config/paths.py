"""Where assetwatch looks for YAML config files.

User file:
- Windows: ``%APPDATA%\\assetwatch\\config.yaml``
- elsewhere: ``$XDG_CONFIG_HOME/assetwatch/config.yaml``, then
  ``~/.config/assetwatch/config.yaml`` if ``~/.config`` exists, else
  ``~/.assetwatch/config.yaml``

Project file: ``<root>/.assetwatch/config.yaml``
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
APP_NAME = "assetwatch"
PROJECT_DIR = ".assetwatch"


def _user_config_dir() -> Path | None:
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        return Path(app_data) / APP_NAME if app_data else None

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME

    home = Path.home()
    if (home / ".config").exists():
        return home / ".config" / APP_NAME
    return home / PROJECT_DIR


def get_user_config_path() -> Path | None:
    """User-level config file, or None when it cannot be located.

    The file itself may not exist.
    """
    directory = _user_config_dir()
    return directory / CONFIG_FILENAME if directory is not None else None


def get_project_config_path(root: str | Path) -> Path:
    return Path(root) / PROJECT_DIR / CONFIG_FILENAME


def get_config_paths(root: str | Path | None = None) -> list[Path]:
    """Candidate config files, lowest priority first."""
    candidates = [get_user_config_path()]
    if root:
        candidates.append(get_project_config_path(root))
    return [path for path in candidates if path is not None]
