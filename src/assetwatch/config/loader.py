"""Configuration file loading.

Handles:
- YAML file parsing
- Environment variable overrides
- Conversion from merged dict to the immutable Settings snapshot
- Project root validation
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from assetwatch.config.merge import merge_configs
from assetwatch.config.paths import get_config_paths
from assetwatch.config.schema import (
    DEFAULT_ASSET_WRAPPERS,
    DEFAULT_COMPILER,
    DEFAULT_IGNORE_FOLDERS,
    DEFAULT_PROJECT_MARKERS,
    DEFAULT_SHADER_EXTENSION,
    DEFAULT_TRACKED_EXTENSIONS,
    DEFAULT_USINGS,
    LoggingConfig,
    Settings,
    normalize_extension,
    normalize_folder,
)
from assetwatch.errors import ConfigurationError

_log = logging.getLogger("assetwatch.config")

_TYPE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build a config layer from environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("ASSETWATCH_LOG")
    if log_path:
        overrides["logging"] = {"file": log_path}

    compiler = os.environ.get("ASSETWATCH_COMPILER")
    if compiler:
        overrides["compiler"] = compiler

    return overrides


def _as_list(value: Any) -> list[str]:
    """Accept either a YAML list or a comma separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    if isinstance(value, Iterable):
        return [str(v).strip() for v in value if str(v).strip()]
    return [str(value)]


def _wrappers(data: dict[str, Any], tracked: frozenset[str]) -> dict[str, str]:
    raw = data.get("asset_wrappers")
    if raw is None:
        # Built-in entries only apply to extensions that are still tracked
        return {ext: name for ext, name in DEFAULT_ASSET_WRAPPERS.items() if ext in tracked}

    if not isinstance(raw, dict):
        raise ConfigurationError("asset_wrappers must be a mapping of extension to type name")

    wrappers: dict[str, str] = {}
    for ext, type_name in raw.items():
        ext = normalize_extension(str(ext))
        type_name = str(type_name)
        if ext not in tracked:
            raise ConfigurationError(f"asset_wrappers: extension '{ext}' is not a tracked extension")
        if not _TYPE_NAME.match(type_name):
            raise ConfigurationError(f"asset_wrappers: '{type_name}' is not a valid type name")
        wrappers[ext] = type_name
    return wrappers


def dict_to_settings(data: dict[str, Any], root: str | Path) -> Settings:
    """Convert a merged config dict to a Settings snapshot.

    Args:
        data: Merged configuration dictionary.
        root: Project root directory.

    Raises:
        ConfigurationError: If the asset wrapper table is invalid.
    """
    root_path = Path(root).expanduser().resolve()
    naming = data.get("naming") or {}

    ignore = {normalize_folder(f) for f in DEFAULT_IGNORE_FOLDERS}
    ignore.update(normalize_folder(f) for f in _as_list(data.get("ignore_folders")))
    ignore.discard("")

    tracked_list = _as_list(data.get("tracked_extensions"))
    tracked = frozenset(normalize_extension(e) for e in (tracked_list or DEFAULT_TRACKED_EXTENSIONS))

    output = data.get("output")
    compiler = data.get("compiler") or DEFAULT_COMPILER

    log_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=log_data.get("verbose"),
        file=log_data.get("file"),
    )

    return Settings(
        root=root_path,
        project_name=str(data.get("project_name") or root_path.name),
        ignore_folders=frozenset(ignore),
        tracked_extensions=tracked,
        shader_extension=normalize_extension(data.get("shader_extension") or DEFAULT_SHADER_EXTENSION),
        snake_case=bool(naming.get("snake_case", True)),
        include_extension=bool(naming.get("include_extension", True)),
        emit_strings=bool(naming.get("emit_strings", True)),
        ignore_root_files=bool(data.get("ignore_root_files", False)),
        silent=bool(data.get("silent", False)),
        output_path=root_path / Path(output).expanduser() if output else None,
        compiler_path=Path(compiler).expanduser(),
        asset_wrappers=MappingProxyType(_wrappers(data, tracked)),
        usings=tuple(_as_list(data.get("usings"))) or DEFAULT_USINGS,
        root_class=str(data.get("root_class") or "R"),
        project_markers=tuple(
            normalize_extension(m) for m in _as_list(data.get("project_markers", DEFAULT_PROJECT_MARKERS))
        ),
        logging=logging_config,
    )


def validate_project_root(root: Path, markers: Iterable[str] = DEFAULT_PROJECT_MARKERS) -> None:
    """Check that ``root`` is a directory recognizable as a project.

    Raises:
        ConfigurationError: If the root is missing, not a directory, or holds
            no file with one of the marker extensions.
    """
    if not root.exists():
        raise ConfigurationError(f"Project root does not exist: {root}")
    if not root.is_dir():
        raise ConfigurationError(f"Project root is not a directory: {root}")

    wanted = {m.lower() for m in markers}
    if not wanted:
        return
    try:
        found = any(p.is_file() and p.suffix.lower() in wanted for p in root.iterdir())
    except OSError as e:
        raise ConfigurationError(f"Cannot list project root {root}: {e}") from e
    if not found:
        raise ConfigurationError(
            f"{root} is not a project directory (no {', '.join(sorted(wanted))} file found)"
        )


def load_settings(
    root: str | Path,
    config_file: Path | None = None,
    overrides: dict[str, Any] | None = None,
    validate: bool = True,
) -> Settings:
    """Load and merge settings from all sources.

    Priority order (highest to lowest):
    1. ``overrides`` (command line)
    2. Environment variables
    3. Explicit ``config_file``
    4. Project config ($root/.assetwatch/config.yaml)
    5. User config

    Args:
        root: Project root directory.
        config_file: Optional extra YAML file.
        overrides: Already-parsed command line values.
        validate: Check the root with validate_project_root().

    Raises:
        ConfigurationError: On an unusable root or invalid settings.
    """
    layers: list[dict[str, Any]] = []

    for path in get_config_paths(root):
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            layers.append(config_data)

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        layers.append(load_yaml_file(config_file))

    layers.append(env_overrides())
    layers.append(overrides or {})

    settings = dict_to_settings(merge_configs(*layers), root)
    if validate:
        validate_project_root(settings.root, settings.project_markers)
    return settings
