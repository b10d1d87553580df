"""Shaderbuild: flatten, compile and watch GLSL shaders."""

# ruff: noqa: F401

from ._version import __version__, version_info
from . import utils

from .compiler import (
    ShaderArtifact,
    ArtifactSaveError,
    ShaderPreprocessor,
    PreprocessorError,
    IncludeNotFoundError,
    MalformedIncludeError,
    CircularIncludeError,
    SubprocessExecutor,
    ProcessResult,
    invoke_compiler,
    remap_diagnostics,
    ShaderCompilerInterface,
    VulkanShaderCompiler,
)
from .build import gather, build_all, ShaderBuilder, ShaderWatcher

from .utils import logger
from .utils.config import BuildConfig
