"""Tests for shader compilation."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from assetwatch.shaders import CompileResult, CompileStatus, ShaderCompiler

from tests.utils import compiler_calls, touch

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake compiler is a shell script")


class TestCompileResult:
    def test_success(self) -> None:
        result = CompileResult(
            path=Path("Effects/Glow.fx"),
            command="fxc Effects/Glow.fx",
            exit_code=0,
            status=CompileStatus.OK,
            output="",
            duration_ms=1.0,
        )
        assert result.success
        assert repr(result) == "<CompileResult ok, Glow.fx>"

    def test_failure_repr(self) -> None:
        result = CompileResult(
            path=Path("Glow.fx"),
            command="fxc Glow.fx",
            exit_code=3,
            status=CompileStatus.FAILED,
            output="error",
            duration_ms=1.0,
        )
        assert not result.success
        assert repr(result) == "<CompileResult failed, Glow.fx, exit=3>"


@posix_only
class TestCompileOne:
    """Test invoking the external compiler."""

    def test_success(self, project: Path, make_settings, fake_compiler: Path) -> None:
        shader = touch(project, "Effects/Glow.fx")
        result = ShaderCompiler(make_settings()).compile_one(shader)

        assert result.status is CompileStatus.OK
        assert result.exit_code == 0
        assert f"compiled {shader}" in result.output
        assert compiler_calls(fake_compiler) == [str(shader)]
        assert str(fake_compiler) in result.command

    def test_nonzero_exit(self, project: Path, make_settings) -> None:
        shader = touch(project, "Effects/bad.fx")
        result = ShaderCompiler(make_settings()).compile_one(shader)

        assert result.status is CompileStatus.FAILED
        assert result.exit_code == 3
        assert "error X3000" in result.output

    def test_silent_discards_output(self, project: Path, make_settings, fake_compiler: Path) -> None:
        shader = touch(project, "Effects/bad.fx")
        result = ShaderCompiler(make_settings(silent=True)).compile_one(shader)

        assert result.status is CompileStatus.FAILED
        assert result.output == ""
        assert compiler_calls(fake_compiler) == [str(shader)]

    def test_missing_compiler(self, project: Path, make_settings) -> None:
        shader = touch(project, "Effects/Glow.fx")
        settings = make_settings(compiler_path=project / "ShaderCompile" / "missing.exe")
        result = ShaderCompiler(settings).compile_one(shader)

        assert result.status is CompileStatus.LAUNCH_FAILED
        assert result.exit_code is None
        assert not result.success

    def test_one_failure_does_not_affect_next(self, project: Path, make_settings) -> None:
        compiler = ShaderCompiler(make_settings())
        bad = compiler.compile_one(touch(project, "bad.fx"))
        good = compiler.compile_one(touch(project, "good.fx"))
        assert not bad.success
        assert good.success


class TestFindSources:
    def test_skips_ignored_folders(self, project: Path, make_settings) -> None:
        touch(project, "Effects/Glow.fx")
        touch(project, "Effects/Blur.FX")
        touch(project, "Effects/Glow.xnb")
        touch(project, "bin/Debug/Copy.fx")
        touch(project, "Root.fx")

        found = ShaderCompiler(make_settings()).find_sources()

        assert found == [project / "Root.fx", project / "Effects" / "Blur.FX", project / "Effects" / "Glow.fx"]

    def test_relative_ignore_entry(self, project: Path, make_settings) -> None:
        touch(project, "Shaders/Raw/a.fx")
        touch(project, "Shaders/b.fx")
        settings = make_settings(ignore_folders=frozenset({"shaders/raw"}))
        assert ShaderCompiler(settings).find_sources() == [project / "Shaders" / "b.fx"]

    def test_custom_shader_extension(self, project: Path, make_settings) -> None:
        touch(project, "a.hlsl")
        touch(project, "b.fx")
        settings = make_settings(shader_extension=".hlsl")
        assert ShaderCompiler(settings).find_sources() == [project / "a.hlsl"]

    def test_nothing_to_compile(self, project: Path, make_settings) -> None:
        assert ShaderCompiler(make_settings()).find_sources() == []


@posix_only
class TestCompileAll:
    def test_compiles_each_source(self, project: Path, make_settings, fake_compiler: Path) -> None:
        touch(project, "Effects/bad.fx")
        touch(project, "Effects/good.fx")

        results = ShaderCompiler(make_settings()).compile_all()

        assert [r.status for r in results] == [CompileStatus.FAILED, CompileStatus.OK]
        assert len(compiler_calls(fake_compiler)) == 2
