"""Layered merging of configuration dicts.

Sources are applied lowest priority first: user file, project file,
explicit file, environment, command line.
"""

from __future__ import annotations

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` on top of ``base`` and return a new dict.

    - Nested dicts merge key by key (e.g. the ``naming`` section)
    - Lists replace the base list wholesale
    - None in ``override`` leaves the base value alone
    """
    result = dict(base)

    for key, value in override.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value

    return result


def merge_configs(*layers: dict[str, Any] | None) -> dict[str, Any]:
    """Fold config layers together, later layers winning."""
    result: dict[str, Any] = {}
    for layer in layers:
        if layer:
            result = deep_merge(result, layer)
    return result
