"""Human-readable console lines for watch activity."""

from __future__ import annotations

from datetime import datetime
from pathlib import PurePath

from rich.console import Console
from rich.markup import escape

from assetwatch.shaders.result import CompileResult, CompileStatus
from assetwatch.watching.events import ChangeKind

# kind -> (label, style)
_CLASSIFICATION = {
    ChangeKind.CREATED: ("created", "green"),
    ChangeKind.DELETED: ("deleted", "yellow"),
    ChangeKind.RENAMED: ("renamed", "blue"),
}
_UNRECOGNIZED = ("unrecognized", "red")


def classify(kind: ChangeKind) -> tuple[str, str]:
    """Label and style for a change kind."""
    return _CLASSIFICATION.get(kind, _UNRECOGNIZED)


class Reporter:
    """Prints event classifications and compile outcomes.

    Nothing is printed while ``silent`` is set.
    """

    def __init__(self, console: Console | None = None, silent: bool = False) -> None:
        self.console = console or Console(highlight=False)
        self.silent = silent

    def _print(self, message: str) -> None:
        if not self.silent:
            self.console.print(message)

    def change(self, kind: ChangeKind, relative: PurePath | str, when: datetime) -> None:
        label, style = classify(kind)
        self._print(
            f"[{style}]\\[{label}][/{style}]  [cyan]{escape(str(relative))}[/cyan]"
            f"  [white]{when:%Y-%m-%d %H:%M:%S}[/white]"
        )

    def shader_changed(self, relative: PurePath | str, when: datetime) -> None:
        self._print(
            f"[blue]\\[shader changed][/blue]  [cyan]{escape(str(relative))}[/cyan]"
            f"  [white]{when:%Y-%m-%d %H:%M:%S}[/white]"
        )

    def compiled(self, result: CompileResult, relative: PurePath | str) -> None:
        name = escape(str(relative))
        if result.status is CompileStatus.OK:
            self._print(f"[yellow]\\[compile][/yellow]  [magenta]{name}[/magenta]  [green]ok[/green]")
        elif result.status is CompileStatus.FAILED:
            self._print(
                f"[yellow]\\[compile][/yellow]  [magenta]{name}[/magenta]"
                f"  [red]failed (exit {result.exit_code})[/red]"
            )
            if result.output:
                self._print(escape(result.output.rstrip()))
        else:
            self._print(
                f"[yellow]\\[compile][/yellow]  [magenta]{name}[/magenta]"
                "  [red]compiler could not be started[/red]"
            )

    def generated(self, output: PurePath | str, file_count: int) -> None:
        self._print(f"[green]Generated {escape(str(output))} ({file_count} files)[/green]")

    def error(self, message: str) -> None:
        # Errors are shown even when silent
        self.console.print(f"[red]{escape(message)}[/red]")
