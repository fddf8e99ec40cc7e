"""Command-line interface for assetwatch."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from assetwatch import __version__
from assetwatch.config import load_settings
from assetwatch.errors import AssetWatchError, ConfigurationError
from assetwatch.logging import get_logger, setup_logging
from assetwatch.reporting import Reporter
from assetwatch.sync import AssetSynchronizer
from assetwatch.watching import EventSequencer, WatchController

log = get_logger("cli")

console = Console(stderr=True, highlight=False)

EXIT_CONFIG_ERROR = 2


def _flag(parser: argparse.ArgumentParser, name: str, dest: str, help_text: str) -> None:
    """Add a --name / --no-name pair that defaults to None (unset)."""
    parser.add_argument(f"--{name}", dest=dest, action="store_true", default=None, help=help_text)
    parser.add_argument(f"--no-{name}", dest=dest, action="store_false", default=None, help=argparse.SUPPRESS)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="assetwatch",
        description="Compile shaders and generate asset references for a mod project, "
        "then keep both up to date while files change",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project root (default: current directory)",
    )
    parser.add_argument("--config", type=Path, help="Extra YAML config file")
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=None,
        help="More log output (-v verbose, -vv trace)",
    )
    parser.add_argument("--silent", action="store_true", default=None, help="Suppress console output")
    parser.add_argument("--once", action="store_true", help="Run the initial sync and exit")
    _flag(parser, "snake-case", "snake_case", "Separate identifier parts with underscores (default)")
    _flag(parser, "extension", "include_extension", "Append the file extension to identifiers (default)")
    _flag(parser, "strings", "emit_strings", "Emit string constants next to asset handles (default)")
    parser.add_argument(
        "--ignore-root",
        dest="ignore_root_files",
        action="store_true",
        default=None,
        help="Do not collect files directly under the project root",
    )
    parser.add_argument(
        "--ignore-folders",
        help="Comma separated folder names or relative paths to ignore, added to the defaults",
    )
    parser.add_argument("--compiler", help="Path to the shader compiler executable")
    parser.add_argument("--output", help="Generated file path, relative to the project root")
    return parser


def overrides_from_args(parsed: argparse.Namespace) -> dict[str, Any]:
    """Map parsed arguments onto a config layer. Unset flags stay None."""
    verbose = parsed.verbose
    return {
        "naming": {
            "snake_case": parsed.snake_case,
            "include_extension": parsed.include_extension,
            "emit_strings": parsed.emit_strings,
        },
        "ignore_root_files": parsed.ignore_root_files,
        "ignore_folders": parsed.ignore_folders,
        "silent": parsed.silent,
        "compiler": parsed.compiler,
        "output": parsed.output,
        "logging": {"verbose": min(verbose + 2, 4) if verbose is not None else None},
    }


def run_cli(args: Sequence[str]) -> int:
    """Run the CLI with the given arguments and return an exit code."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        settings = load_settings(parsed.path, config_file=parsed.config, overrides=overrides_from_args(parsed))
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return EXIT_CONFIG_ERROR

    setup_logging(settings.logging)
    reporter = Reporter(silent=settings.silent)
    synchronizer = AssetSynchronizer(settings, reporter=reporter)

    ok = synchronizer.initial_sync()
    if parsed.once:
        return 0 if ok else 1

    sequencer = EventSequencer(settings, synchronizer)
    controller = WatchController(
        settings.root,
        sequencer,
        on_error=lambda e: reporter.error(f"Error while watching the project: {e}"),
    )
    sequencer.start()
    try:
        controller.start()
    except AssetWatchError as e:
        reporter.error(str(e))
        sequencer.stop()
        return 1

    if not settings.silent:
        console.print(f"[green]Watching {escape(str(settings.root))}[/green] (Ctrl+C to exit)")
    try:
        while True:
            time.sleep(1.0)
            controller.check_health()
    except KeyboardInterrupt:
        log.info("Interrupted, shutting down")
    finally:
        controller.stop()
        sequencer.stop()
    return 0


def main() -> None:
    sys.exit(run_cli(sys.argv[1:]))
