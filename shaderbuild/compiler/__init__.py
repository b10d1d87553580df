"""
This subpackage turns a single shader into a compiled artifact.

## A note about includes

GLSL (as consumed by glslangValidator) has no include mechanism of its own,
so shaders are flattened before compiling: every ``#include "file"`` is
replaced by the (recursively flattened) contents of that file. The compiler
then only sees one file, and reports errors against it. To still get useful
error messages, every contributing file gets an index, ``#line`` markers are
inserted so that the compiler reports ``<index>:<line>``, and these indices
are replaced with the actual paths afterwards.
"""

from .artifact import ShaderArtifact, ArtifactSaveError  # noqa
from .preprocess import (  # noqa
    ShaderPreprocessor,
    PreprocessorError,
    IncludeNotFoundError,
    MalformedIncludeError,
    CircularIncludeError,
)
from .executor import SubprocessExecutor, ProcessResult, invoke_compiler  # noqa
from .diagnostics import remap_diagnostics, SEVERITIES  # noqa
from .templating import render_preamble  # noqa
from .base import ShaderCompilerInterface, VulkanShaderCompiler  # noqa
