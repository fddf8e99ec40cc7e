"""Configuration management for assetwatch.

Settings are resolved once at startup from layered sources:
- User-level config (~/.config/assetwatch/ or %APPDATA%)
- Project-level config ($root/.assetwatch/config.yaml)
- An explicit --config file
- Environment variable overrides
- Command line flags (highest priority)

Example usage:
    from assetwatch.config import load_settings

    settings = load_settings("/path/to/MyMod")
    print(settings.output_path)
"""

from assetwatch.config.loader import (
    dict_to_settings,
    env_overrides,
    load_settings,
    load_yaml_file,
    validate_project_root,
)
from assetwatch.config.merge import deep_merge, merge_configs
from assetwatch.config.paths import get_config_paths, get_project_config_path, get_user_config_path
from assetwatch.config.schema import LoggingConfig, Settings

__all__ = [
    "Settings",
    "LoggingConfig",
    "load_settings",
    "dict_to_settings",
    "env_overrides",
    "load_yaml_file",
    "validate_project_root",
    "deep_merge",
    "merge_configs",
    "get_config_paths",
    "get_project_config_path",
    "get_user_config_path",
]
