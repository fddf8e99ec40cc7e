"""Filesystem change events as seen by the sequencer."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ChangeKind(Enum):
    """Kinds of filesystem notification."""

    CREATED = "created"
    DELETED = "deleted"
    RENAMED = "renamed"
    MODIFIED = "modified"
    ERROR = "error"


@dataclass(frozen=True)
class FileChangeEvent:
    """A single filesystem notification.

    ``path`` is the affected path (the destination for renames);
    ``old_path`` is only set for renames.
    """

    path: Path
    kind: ChangeKind
    is_directory: bool = False
    old_path: Path | None = None
    timestamp: float = field(default_factory=time.time, compare=False)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def signature(self) -> tuple[str, str, ChangeKind]:
        """Identity used for duplicate suppression."""
        return (self.name, str(self.path), self.kind)
