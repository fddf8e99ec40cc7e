"""Shader compilation through the external compiler executable."""

from assetwatch.shaders.compiler import ShaderCompiler
from assetwatch.shaders.result import CompileResult, CompileStatus

__all__ = [
    "CompileResult",
    "CompileStatus",
    "ShaderCompiler",
]
