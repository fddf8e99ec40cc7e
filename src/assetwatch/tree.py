"""In-memory mirror of the watched project tree.

Only tracked files and non-ignored directories are kept. The whole tree is
rebuilt by ``refresh`` on every qualifying change; there is no incremental
patching.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from assetwatch.config.schema import Settings
from assetwatch.logging import get_logger

log = get_logger("tree")


@dataclass
class TreeNode:
    """A directory or a tracked file."""

    name: str
    path: Path
    relative_path: PurePath | None  # None only for the root
    is_directory: bool
    children: list[TreeNode] = field(default_factory=list)

    def add_child(self, child: TreeNode) -> TreeNode:
        if not self.is_directory:
            raise ValueError(f"Cannot add children to file node {self.path}")
        self.children.append(child)
        return child

    def has_file(self) -> bool:
        """True if any descendant is a file."""
        return any(not node.is_directory for node in self.walk())

    def walk(self) -> Iterator[TreeNode]:
        """Yield all descendants depth-first, in child order."""
        for child in self.children:
            yield child
            yield from child.walk()

    def files(self) -> list[TreeNode]:
        return [node for node in self.walk() if not node.is_directory]


@dataclass(frozen=True)
class ScanWarning:
    """A directory that could not be listed during a scan."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class ScanResult:
    root: TreeNode
    warnings: list[ScanWarning] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.warnings

    @property
    def root_missing(self) -> bool:
        """True when the root itself could not be listed."""
        return any(w.path == self.root.path for w in self.warnings)


def refresh(settings: Settings) -> ScanResult:
    """Scan ``settings.root`` and build a fresh tree.

    Children are ordered files first, then directories, each sorted by name.
    A directory that cannot be listed is left out and reported in
    ``ScanResult.warnings``; scanning of its siblings continues.
    """
    root = TreeNode(
        name=settings.root.name,
        path=settings.root,
        relative_path=None,
        is_directory=True,
    )
    result = ScanResult(root=root)
    if not _load(settings, settings.root, root, result):
        log.warning("Project root could not be scanned: %s", settings.root)
    return result


def _load(settings: Settings, directory: Path, node: TreeNode, result: ScanResult) -> bool:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        result.warnings.append(ScanWarning(directory, e.strerror or str(e)))
        log.warning("Cannot scan %s: %s", directory, e)
        return False

    files: list[os.DirEntry[str]] = []
    dirs: list[os.DirEntry[str]] = []
    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                dirs.append(entry)
            elif entry.is_file():
                files.append(entry)
        except OSError as e:
            log.debug("Skipping %s: %s", entry.path, e)

    at_root = node.relative_path is None
    if not (at_root and settings.ignore_root_files):
        for entry in files:
            if not settings.is_tracked(entry.name):
                continue
            path = Path(entry.path)
            node.add_child(
                TreeNode(
                    name=path.stem,
                    path=path,
                    relative_path=path.relative_to(settings.root),
                    is_directory=False,
                )
            )

    for entry in dirs:
        path = Path(entry.path)
        relative = path.relative_to(settings.root)
        if settings.is_ignored_dir(relative):
            log.debug("Ignoring directory %s", relative)
            continue
        child = TreeNode(name=entry.name, path=path, relative_path=relative, is_directory=True)
        if _load(settings, path, child, result):
            node.add_child(child)

    return True
