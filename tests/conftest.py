"""Root pytest configuration for all tests."""

from __future__ import annotations

import io
from collections.abc import Iterator
from pathlib import Path

import pytest
from rich.console import Console

from assetwatch.config.schema import Settings
from assetwatch.logging import reset_logging
from assetwatch.reporting import Reporter

from tests.utils import write_fake_compiler


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep user-level config, environment overrides and log handlers out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    monkeypatch.delenv("ASSETWATCH_LOG", raising=False)
    monkeypatch.delenv("ASSETWATCH_COMPILER", raising=False)
    yield
    reset_logging()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty mod project root with a .csproj marker."""
    root = (tmp_path / "MyMod").resolve()
    root.mkdir()
    (root / "MyMod.csproj").write_text("<Project />\n", encoding="utf-8")
    return root


@pytest.fixture
def fake_compiler(tmp_path: Path) -> Path:
    """Executable that records its argument and fails for names containing 'bad'."""
    return write_fake_compiler(tmp_path / "compiler")


@pytest.fixture
def make_settings(project: Path, fake_compiler: Path):
    """Factory for Settings rooted at the test project."""

    def factory(**kwargs) -> Settings:
        kwargs.setdefault("compiler_path", fake_compiler)
        kwargs.setdefault("project_name", project.name)
        return Settings(root=project, **kwargs)

    return factory


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(console_output: io.StringIO) -> Reporter:
    """Reporter writing plain text into ``console_output``."""
    console = Console(file=console_output, force_terminal=False, color_system=None, width=200)
    return Reporter(console=console)
