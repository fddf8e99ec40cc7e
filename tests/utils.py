"""Shared test helpers for assetwatch tests."""

from __future__ import annotations

import stat
import threading
import time
from collections.abc import Callable
from pathlib import Path

from assetwatch.reporting import Reporter
from assetwatch.shaders.result import CompileResult, CompileStatus

FAKE_COMPILER = """#!/bin/sh
echo "$1" >> "{log}"
case "$1" in
    *bad*)
        echo "error X3000: syntax error"
        exit 3
        ;;
esac
echo "compiled $1"
exit 0
"""


def write_fake_compiler(directory: Path) -> Path:
    """Write a POSIX shell compiler stand-in; invocations go to ``calls.log``."""
    directory.mkdir(parents=True, exist_ok=True)
    script = directory / "fakec"
    script.write_text(FAKE_COMPILER.format(log=directory / "calls.log"), encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


def compiler_calls(compiler: Path) -> list[str]:
    """Arguments the fake compiler has been called with, in order."""
    log = compiler.parent / "calls.log"
    if not log.exists():
        return []
    return log.read_text(encoding="utf-8").splitlines()


def touch(root: Path, relative: str, content: str = "") -> Path:
    """Create a file (and its parents) below ``root``."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.05) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class RecordingSynchronizer:
    """Stand-in for AssetSynchronizer that records calls.

    ``active``/``max_active`` track how many units ran at the same time.
    """

    def __init__(self, work_time: float = 0.0, fail_first_rebuild: bool = False) -> None:
        self.reporter = Reporter(silent=True)
        self.work_time = work_time
        self.fail_first_rebuild = fail_first_rebuild
        self.calls: list[tuple[str, Path | None]] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def _enter(self) -> None:
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)

    def _leave(self) -> None:
        with self._lock:
            self.active -= 1

    def compile(self, path: Path) -> CompileResult:
        self._enter()
        try:
            time.sleep(self.work_time)
            self.calls.append(("compile", path))
            return CompileResult(
                path=path,
                command=f"fakec {path}",
                exit_code=0,
                status=CompileStatus.OK,
                output="",
                duration_ms=0.0,
            )
        finally:
            self._leave()

    def rebuild(self) -> bool:
        self._enter()
        try:
            time.sleep(self.work_time)
            self.calls.append(("rebuild", None))
            if self.fail_first_rebuild and self.count("rebuild") == 1:
                raise RuntimeError("boom")
            return True
        finally:
            self._leave()

    def count(self, kind: str) -> int:
        return sum(1 for name, _ in self.calls if name == kind)
