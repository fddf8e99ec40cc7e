"""Configuration schema dataclasses for assetwatch.

``Settings`` is the resolved, immutable snapshot every component reads.
It is built once by the loader and never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from types import MappingProxyType

DEFAULT_IGNORE_FOLDERS = (
    ".git",
    "bin",
    "obj",
    ".idea",
    "Properties",
    "Localization",
    "Resource",
    ".vs",
)

DEFAULT_TRACKED_EXTENSIONS = (
    ".png",
    ".jpg",
    ".webp",
    ".bmp",
    ".gif",
    ".mp3",
    ".wav",
    ".ogg",
    ".flac",
    ".xnb",
    ".json",
)

DEFAULT_ASSET_WRAPPERS = {
    ".png": "Texture2D",
    ".xnb": "Effect",
}

DEFAULT_USINGS = (
    "Microsoft.Xna.Framework.Graphics",
    "ReLogic.Content",
    "Terraria.ModLoader",
)

DEFAULT_PROJECT_MARKERS = (".csproj", ".sln")

DEFAULT_SHADER_EXTENSION = ".fx"
DEFAULT_COMPILER = "ShaderCompile/ShaderCompile.exe"
DEFAULT_OUTPUT = "Resource/R.cs"


def normalize_folder(name: str) -> str:
    """Normalize an ignore entry: lowercase, forward slashes, no edge slashes."""
    return name.replace("\\", "/").strip("/").lower()


def normalize_extension(ext: str) -> str:
    """Normalize an extension to lowercase with a leading dot."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass(frozen=True)
class Settings:
    """Immutable configuration snapshot shared by every component."""

    root: Path
    project_name: str
    ignore_folders: frozenset[str] = frozenset(normalize_folder(f) for f in DEFAULT_IGNORE_FOLDERS)
    tracked_extensions: frozenset[str] = frozenset(DEFAULT_TRACKED_EXTENSIONS)
    shader_extension: str = DEFAULT_SHADER_EXTENSION
    snake_case: bool = True
    include_extension: bool = True
    emit_strings: bool = True
    ignore_root_files: bool = False
    silent: bool = False
    output_path: Path | None = None
    compiler_path: Path = Path(DEFAULT_COMPILER)
    asset_wrappers: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_ASSET_WRAPPERS))
    )
    usings: tuple[str, ...] = DEFAULT_USINGS
    root_class: str = "R"
    project_markers: tuple[str, ...] = DEFAULT_PROJECT_MARKERS
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        if self.output_path is None:
            object.__setattr__(self, "output_path", self.root / DEFAULT_OUTPUT)

    @property
    def namespace(self) -> str:
        """Namespace of the generated file."""
        return f"{self.project_name}.Resource"

    def is_tracked(self, path: str | PurePath) -> bool:
        return PurePath(path).suffix.lower() in self.tracked_extensions

    def is_shader(self, path: str | PurePath) -> bool:
        return PurePath(path).suffix.lower() == self.shader_extension

    def wrapper_for(self, path: str | PurePath) -> str | None:
        """Typed asset wrapper for a file, or None if its extension has none."""
        return self.asset_wrappers.get(PurePath(path).suffix.lower())

    def relative_path(self, path: str | PurePath) -> PurePath:
        """Path relative to the root. Raises ValueError for paths outside it."""
        return PurePath(path).relative_to(self.root)

    def is_ignored_dir(self, relative_dir: str | PurePath) -> bool:
        """Check a root-relative directory against the ignore set.

        Every successive prefix is tested; a prefix is ignored when either its
        full relative path or its last segment is an ignore entry. Matching is
        case-insensitive. The root itself ("" or ".") is never ignored.
        """
        parts = [p for p in PurePath(relative_dir).parts if p not in ("", ".")]
        prefix: list[str] = []
        for part in parts:
            prefix.append(part.lower())
            if part.lower() in self.ignore_folders or "/".join(prefix) in self.ignore_folders:
                return True
        return False

