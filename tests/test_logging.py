"""Tests for logging setup."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from assetwatch.config.schema import LoggingConfig
from assetwatch.logging import TRACE, VERBOSE, get_logger, logger, reset_logging, resolve_level, setup_logging


@pytest.fixture
def fresh_logger() -> Iterator[logging.Logger]:
    """Start from an unconfigured logger and undo whatever the test set up."""
    reset_logging()
    yield logger
    reset_logging()


class TestResolveLevel:
    def test_no_config(self) -> None:
        assert resolve_level(None) == logging.INFO

    def test_level_name(self) -> None:
        assert resolve_level(LoggingConfig(level="debug")) == logging.DEBUG
        assert resolve_level(LoggingConfig(level="warn")) == logging.WARNING

    def test_unknown_level_name(self) -> None:
        assert resolve_level(LoggingConfig(level="chatty")) == logging.INFO

    @pytest.mark.parametrize(
        ("verbose", "level"),
        [(0, logging.ERROR), (1, logging.WARNING), (2, logging.INFO), (3, VERBOSE), (4, TRACE), (9, TRACE)],
    )
    def test_verbosity(self, verbose: int, level: int) -> None:
        assert resolve_level(LoggingConfig(verbose=verbose)) == level

    def test_verbose_beats_level(self) -> None:
        assert resolve_level(LoggingConfig(level="ERROR", verbose=4)) == TRACE


class TestSetupLogging:
    def test_file_handler_from_config(self, fresh_logger: logging.Logger, tmp_path: Path) -> None:
        log_file = tmp_path / "aw.log"
        setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)))

        get_logger("tree").debug("scanning %s", "Images")
        for handler in fresh_logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "debug tree: scanning Images" in text

    def test_file_handler_from_env(
        self, fresh_logger: logging.Logger, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("ASSETWATCH_LOG", str(log_file))
        setup_logging()

        assert any(isinstance(h, logging.FileHandler) for h in fresh_logger.handlers)

    def test_second_call_is_noop(self, fresh_logger: logging.Logger, tmp_path: Path) -> None:
        setup_logging(LoggingConfig(file=str(tmp_path / "a.log")))
        count = len(fresh_logger.handlers)
        setup_logging(LoggingConfig(file=str(tmp_path / "b.log")))
        assert len(fresh_logger.handlers) == count
        assert not (tmp_path / "b.log").exists()

    def test_unwritable_file_falls_back_to_stderr(
        self, fresh_logger: logging.Logger, tmp_path: Path
    ) -> None:
        setup_logging(LoggingConfig(file=str(tmp_path / "missing-dir" / "aw.log")))
        added = [h for h in fresh_logger.handlers if isinstance(h, logging.StreamHandler)]
        assert added
        assert not any(isinstance(h, logging.FileHandler) for h in added)


class TestGetLogger:
    def test_child_logger(self) -> None:
        assert get_logger("watching").name == "assetwatch.watching"

    def test_root_logger(self) -> None:
        assert get_logger().name == "assetwatch"
