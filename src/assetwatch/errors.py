"""Exception types raised by assetwatch."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class AssetWatchError(Exception):
    """Base class for assetwatch errors."""


class ConfigurationError(AssetWatchError):
    """Raised when the project root or settings cannot be used.

    Raised when:
    - the root path does not exist or is not a directory
    - the root holds none of the configured project marker files
    - the asset wrapper table names an untracked extension or a bad type name
    """


@dataclass(eq=False)
class IdentifierCollisionError(AssetWatchError):
    """Two members of one generated class map to the same identifier."""

    identifier: str
    container: str  # dotted class path, e.g. "R.Images"
    first: Path
    second: Path

    def __str__(self) -> str:
        return (
            f"Identifier '{self.identifier}' in {self.container} is produced by both "
            f"'{self.first}' and '{self.second}'"
        )


@dataclass(eq=False)
class GeneratedFileWriteError(AssetWatchError):
    """The generated source file could not be written."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Cannot write {self.path}: {self.reason}"
