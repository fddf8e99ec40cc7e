"""Rebuild and compile units of work.

``AssetSynchronizer`` is owned by the sequencer's worker thread; nothing
else touches its tree or writes the generated file while it runs.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from assetwatch.codegen import render_tree
from assetwatch.config.schema import Settings
from assetwatch.errors import GeneratedFileWriteError, IdentifierCollisionError
from assetwatch.logging import get_logger
from assetwatch.reporting import Reporter
from assetwatch.shaders import CompileResult, ShaderCompiler
from assetwatch.tree import TreeNode, refresh

log = get_logger("sync")


def write_generated(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` in one step.

    The text goes to a temporary file in the same directory which is then
    moved over the target, so a failed write leaves the old file intact.

    Raises:
        GeneratedFileWriteError: If the directory or file cannot be written.
    """
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise GeneratedFileWriteError(path=path, reason=e.strerror or str(e)) from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                log.debug("Could not remove temporary file %s", tmp_name)


class AssetSynchronizer:
    """Keeps the generated file and compiled shaders in step with the tree."""

    def __init__(
        self,
        settings: Settings,
        compiler: ShaderCompiler | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self.settings = settings
        self.compiler = compiler or ShaderCompiler(settings)
        self.reporter = reporter or Reporter(silent=settings.silent)
        self.tree: TreeNode | None = None
        self.rebuild_count = 0

    def compile(self, path: Path) -> CompileResult:
        """Compile one shader source and report the outcome."""
        result = self.compiler.compile_one(path)
        self.reporter.compiled(result, self._display(path))
        return result

    def compile_all(self) -> list[CompileResult]:
        results = []
        for path in self.compiler.find_sources():
            results.append(self.compile(path))
        return results

    def rebuild(self) -> bool:
        """Rescan the tree, render and write the generated file.

        Returns:
            True if the file was written. On a naming collision, write
            failure or unreadable root the error is reported and the
            previous file is kept.
        """
        scan = refresh(self.settings)
        if scan.root_missing:
            message = f"Project root {self.settings.root} is not readable; keeping the previous generated file"
            log.error("%s", message)
            self.reporter.error(message)
            return False

        for warning in scan.warnings:
            log.warning("Partial scan, skipped %s", warning)
            self.reporter.error(f"Could not scan {warning}")

        try:
            text = render_tree(scan.root, self.settings)
        except IdentifierCollisionError as e:
            log.error("Generation aborted: %s", e)
            self.reporter.error(str(e))
            return False

        assert self.settings.output_path is not None
        try:
            write_generated(self.settings.output_path, text)
        except GeneratedFileWriteError as e:
            log.error("%s", e)
            self.reporter.error(str(e))
            return False

        self.tree = scan.root
        self.rebuild_count += 1
        log.debug("Wrote %s", self.settings.output_path)
        return True

    def initial_sync(self) -> bool:
        """Compile every shader, then generate the resource file.

        Returns:
            True if every compile succeeded and the file was written.
        """
        log.info("Compiling shaders under %s", self.settings.root)
        results = self.compile_all()
        log.info("Generating %s", self.settings.output_path)
        written = self.rebuild()
        if written and self.tree is not None:
            assert self.settings.output_path is not None
            self.reporter.generated(self._display(self.settings.output_path), len(self.tree.files()))
        return written and all(r.success for r in results)

    def _display(self, path: Path) -> Path:
        try:
            return path.relative_to(self.settings.root)
        except ValueError:
            return path
