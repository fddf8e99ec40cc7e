"""Diagnostic logging for assetwatch.

All modules log through children of the ``assetwatch`` logger obtained with
``get_logger``. ``setup_logging`` attaches the handlers once at startup:

- a log file, from ``logging.file`` in the config or ``ASSETWATCH_LOG``
- otherwise stderr, but only when stderr is an interactive console

Verbosity runs from 0 (errors) to 4 (trace); ``-v`` on the command line
maps to verbose (3) and ``-vv`` to trace (4). User-facing event lines are
not log records; they go through ``assetwatch.reporting``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetwatch.config.schema import LoggingConfig

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

ROOT_NAME = "assetwatch"
logger = logging.getLogger(ROOT_NAME)

# Index is the verbosity value
VERBOSITY_LEVELS = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)

_NAMED_LEVELS = {
    logging.getLevelName(level): level
    for level in (TRACE, logging.DEBUG, VERBOSE, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL)
}
_NAMED_LEVELS["WARN"] = logging.WARNING

_handlers: list[logging.Handler] = []
_initialized = False


class _ShortNameFormatter(logging.Formatter):
    """``12:00:01 warning tree: message``: lowercase level, package prefix dropped."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        record.short_name = record.name.removeprefix(ROOT_NAME).lstrip(".") or ROOT_NAME
        return super().format(record)


def resolve_level(config: LoggingConfig | None) -> int:
    """Effective level for ``config``; INFO when nothing is set.

    ``verbose`` wins over ``level``. Verbosity above 4 means trace, unknown
    level names mean INFO.
    """
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        verbosity = max(config.verbose, 0)
        return VERBOSITY_LEVELS[min(verbosity, len(VERBOSITY_LEVELS) - 1)]
    if config.level:
        return _NAMED_LEVELS.get(config.level.strip().upper(), logging.INFO)
    return logging.INFO


def _log_file(config: LoggingConfig | None) -> str | None:
    path = config.file if config is not None and config.file else os.environ.get("ASSETWATCH_LOG")
    return os.path.expanduser(path) if path else None


def _attach(handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(
        _ShortNameFormatter("%(asctime)s %(levelname)s %(short_name)s: %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)
    _handlers.append(handler)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Attach handlers to the ``assetwatch`` logger.

    Only the first call has an effect until ``reset_logging`` is called. A
    log file that cannot be opened is reported on stderr and stderr is used
    instead.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = resolve_level(config)
    logger.setLevel(level)

    path = _log_file(config)
    if path is None:
        if sys.stderr.isatty():
            _attach(logging.StreamHandler(sys.stderr), level)
        return

    try:
        handler: logging.Handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as e:
        print(f"assetwatch: cannot open log file {path}: {e.strerror or e}", file=sys.stderr)
        handler = logging.StreamHandler(sys.stderr)
    _attach(handler, level)


def reset_logging() -> None:
    """Detach and close everything ``setup_logging`` added."""
    global _initialized
    while _handlers:
        handler = _handlers.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    _initialized = False


def get_logger(name: str | None = None) -> logging.Logger:
    """The package logger, or its child ``assetwatch.<name>``."""
    return logger.getChild(name) if name else logger
