"""Shader compilation result dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CompileStatus(Enum):
    """Outcome of one compiler invocation."""

    OK = "ok"
    FAILED = "failed"  # compiler ran and exited nonzero
    LAUNCH_FAILED = "launch_failed"  # compiler could not be started


@dataclass
class CompileResult:
    """Result of compiling a single shader source.

    Attributes:
        path: The shader source that was compiled.
        command: The command line that was run.
        exit_code: Process exit code, or None if the process never started.
        status: Classification of the outcome.
        output: Captured stdout/stderr (empty when running silent).
        duration_ms: Wall time spent in the compiler, in milliseconds.
    """

    path: Path
    command: str
    exit_code: int | None
    status: CompileStatus
    output: str
    duration_ms: float

    @property
    def success(self) -> bool:
        """True if the compiler exited with code 0."""
        return self.status is CompileStatus.OK

    def __repr__(self) -> str:
        if self.success:
            return f"<CompileResult ok, {self.path.name}>"
        return f"<CompileResult {self.status.value}, {self.path.name}, exit={self.exit_code}>"
