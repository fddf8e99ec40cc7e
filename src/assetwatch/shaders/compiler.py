"""External shader compiler invocation.

The compiler is an opaque executable called as ``<compiler> <shader path>``.
Success or failure is judged by its exit code alone.
"""

from __future__ import annotations

import os
import subprocess
import time
from pathlib import Path

from assetwatch.config.schema import Settings
from assetwatch.logging import get_logger
from assetwatch.shaders.result import CompileResult, CompileStatus

log = get_logger("shaders")


class ShaderCompiler:
    """Runs the external compiler on shader sources.

    Each call blocks until the compiler exits; there is no timeout and no
    retry. Compiling one file never affects another.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def compiler_path(self) -> Path:
        return self._settings.compiler_path

    def compile_one(self, path: str | Path) -> CompileResult:
        """Compile a single shader source.

        When the settings are silent the compiler's output is discarded,
        otherwise stdout and stderr are captured into the result.
        """
        path = Path(path)
        cmd = [str(self.compiler_path), str(path)]
        full_command = subprocess.list2cmdline(cmd)
        silent = self._settings.silent
        start_time = time.perf_counter()

        try:
            completed = subprocess.run(
                cmd,
                stdout=subprocess.DEVNULL if silent else subprocess.PIPE,
                stderr=subprocess.DEVNULL if silent else subprocess.STDOUT,
                check=False,
            )
        except OSError as e:
            # FileNotFoundError / PermissionError land here too
            duration_ms = (time.perf_counter() - start_time) * 1000
            log.error("Cannot start shader compiler %s: %s", self.compiler_path, e)
            return CompileResult(
                path=path,
                command=full_command,
                exit_code=None,
                status=CompileStatus.LAUNCH_FAILED,
                output=str(e),
                duration_ms=duration_ms,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000
        output = ""
        if completed.stdout:
            output = completed.stdout.decode("utf-8", errors="replace")

        if completed.returncode == 0:
            log.info("Compiled %s (%.0f ms)", path, duration_ms)
            status = CompileStatus.OK
        else:
            log.error("Shader compile failed for %s (exit %d)", path, completed.returncode)
            status = CompileStatus.FAILED
        if output:
            log.debug("Compiler output for %s:\n%s", path, output.rstrip())

        return CompileResult(
            path=path,
            command=full_command,
            exit_code=completed.returncode,
            status=status,
            output=output,
            duration_ms=duration_ms,
        )

    def find_sources(self, root: Path | None = None) -> list[Path]:
        """List every shader source under ``root``, skipping ignored folders."""
        root = root or self._settings.root
        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._walk_error):
            current = Path(dirpath)
            # Prune ignored directories in place so os.walk skips them
            dirnames[:] = sorted(
                d for d in dirnames
                if not self._is_ignored(current / d)
            )
            found.extend(current / f for f in sorted(filenames) if self._settings.is_shader(f))
        return found

    def compile_all(self, root: Path | None = None) -> list[CompileResult]:
        """Compile every shader source under ``root`` (defaults to the project root)."""
        results = [self.compile_one(path) for path in self.find_sources(root)]
        failed = sum(1 for r in results if not r.success)
        log.info("Compiled %d shader(s), %d failed", len(results), failed)
        return results

    def _is_ignored(self, directory: Path) -> bool:
        try:
            relative = directory.relative_to(self._settings.root)
        except ValueError:
            return False
        return self._settings.is_ignored_dir(relative)

    @staticmethod
    def _walk_error(error: OSError) -> None:
        log.warning("Cannot scan %s: %s", error.filename, error)
