"""Identifier naming for generated fields.

The mapping from file name to identifier is deterministic and depends only
on the file name and the naming flags in Settings.
"""

from __future__ import annotations

from pathlib import PurePath

from assetwatch.config.schema import Settings


def capitalize_first(text: str) -> str:
    """Upper-case the first character only; the rest is left untouched."""
    if not text:
        return text
    return text[0].upper() + text[1:]


def field_name(path: str | PurePath, settings: Settings, asset: bool = False) -> str:
    """Derive the generated identifier for a file.

    ``Hero.png`` gives ``HeroPng`` / ``Hero_Png`` for the asset handle and
    ``HeroPngString`` / ``Hero_Png_String`` for the string constant. With the
    extension left out the string forms are ``HeroString`` / ``Hero_String``.
    A leading digit gets an underscore prefix (``_1Sword``).

    Args:
        path: File path or name; only the final component is used.
        settings: Naming flags (snake_case, include_extension).
        asset: True for the typed handle, False for the string constant.
    """
    p = PurePath(path)
    result = capitalize_first(p.stem)

    if settings.include_extension:
        if settings.snake_case:
            result += "_"
        result += capitalize_first(p.suffix.replace(".", ""))

    if not asset:
        result += "_String" if settings.snake_case else "String"

    if result and result[0].isdigit():
        result = "_" + result

    return result


def location_string(relative_path: PurePath, project_name: str) -> str:
    """Build the ``{project}/{dir}/{stem}`` lookup key with forward slashes."""
    parts = [project_name]
    parent = relative_path.parent.as_posix()
    if parent not in ("", "."):
        parts.append(parent)
    parts.append(relative_path.stem)
    return "/".join(parts).replace("\\", "/")
