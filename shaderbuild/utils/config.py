"""
The build configuration. There is no configuration file: defaults are paths
relative to the working directory, which can be overridden with environment
variables or by passing arguments (e.g. from the CLI).

Environment variables:

* ``SHADERBUILD_COMPILER``: path to the glslangValidator executable.
* ``SHADERBUILD_INPUT_DIR``: root directory of the shader sources.
* ``SHADERBUILD_OUTPUT_DIR``: root directory of the compiled artifacts.
* ``SHADERBUILD_INCLUDE_DIR``: root search path for ``#include`` directives.
"""

import os
import shutil


DEFAULT_COMPILER = "../ThirdParty/vulkan/1.1.77.0/Bin32/glslangValidator.exe"
DEFAULT_INPUT_DIR = "../Assets/"
DEFAULT_OUTPUT_DIR = "../Temp/Assets/"

COMPILED_EXTENSIONS = (".frag", ".vert")
HEADER_EXTENSIONS = (".h", ".glsl", ".inc")


def find_compiler():
    """Get the default compiler path: the env var, glslangValidator on the PATH,
    or the path relative to the working directory that the engine layout uses.
    """
    compiler = os.getenv("SHADERBUILD_COMPILER", "")
    if compiler:
        return compiler
    return shutil.which("glslangValidator") or os.path.abspath(DEFAULT_COMPILER)


def _normalize_extensions(extensions, name):
    if isinstance(extensions, str):
        extensions = [extensions]
    result = []
    for ext in extensions:
        if not (isinstance(ext, str) and ext):
            raise ValueError(f"Invalid value in {name}: {ext!r}")
        ext = ext.lower()
        if not ext.startswith("."):
            ext = "." + ext
        if ext not in result:
            result.append(ext)
    if not result:
        raise ValueError(f"{name} must not be empty.")
    return tuple(result)


class BuildConfig:
    """The settings for building (and watching) a tree of shaders.

    Parameters
    ----------
    compiler : str | None
        Path to the glslangValidator executable.
    input_root : str | None
        Directory containing the shader sources.
    output_root : str | None
        Directory to write the artifacts to, mirroring the layout of ``input_root``.
    include_root : str | None
        Last-resort search path for includes. Defaults to ``input_root``.
    extensions : tuple
        Extensions of the files that get compiled.
    watch_extensions : tuple | None
        Extensions of the files that trigger a rebuild when changed. The
        compiled extensions are always included.
    artifact_suffix : str
        Suffix appended to the source filename to form the artifact filename.
    glsl_version : int
        The version to put in the ``#version`` line of the preamble.
    glsl_extensions : list | None
        GLSL extensions to enable in the preamble.
    stop_on_failure : bool
        Whether ``build_all()`` aborts at the first failing shader.
    """

    def __init__(
        self,
        compiler=None,
        input_root=None,
        output_root=None,
        include_root=None,
        *,
        extensions=COMPILED_EXTENSIONS,
        watch_extensions=None,
        artifact_suffix=".spirv",
        glsl_version=450,
        glsl_extensions=None,
        stop_on_failure=False,
    ):
        self.compiler = compiler or find_compiler()
        self.input_root = os.path.abspath(input_root or DEFAULT_INPUT_DIR)
        self.output_root = os.path.abspath(output_root or DEFAULT_OUTPUT_DIR)
        self.include_root = os.path.abspath(include_root or self.input_root)

        self.extensions = _normalize_extensions(extensions, "extensions")
        if watch_extensions is None:
            watch_extensions = HEADER_EXTENSIONS
        elif isinstance(watch_extensions, str):
            watch_extensions = [watch_extensions]
        self.watch_extensions = _normalize_extensions(
            self.extensions + tuple(watch_extensions), "watch_extensions"
        )

        if not (isinstance(artifact_suffix, str) and artifact_suffix):
            raise ValueError("artifact_suffix must be a non-empty string.")
        self.artifact_suffix = artifact_suffix

        self.glsl_version = int(glsl_version)
        if glsl_extensions is None:
            glsl_extensions = ["GL_ARB_separate_shader_objects"]
        self.glsl_extensions = list(glsl_extensions)

        self.stop_on_failure = bool(stop_on_failure)

    def __repr__(self):
        return (
            f"<BuildConfig {self.input_root!r} -> {self.output_root!r}"
            f" using {self.compiler!r}>"
        )

    @classmethod
    def from_env(cls, **overrides):
        """Create a config from the environment variables. Keyword arguments
        that are not None take precedence.
        """
        kwargs = {
            "compiler": os.getenv("SHADERBUILD_COMPILER") or None,
            "input_root": os.getenv("SHADERBUILD_INPUT_DIR") or None,
            "output_root": os.getenv("SHADERBUILD_OUTPUT_DIR") or None,
            "include_root": os.getenv("SHADERBUILD_INCLUDE_DIR") or None,
        }
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)

    @property
    def template_vars(self):
        """The variables used to render the preamble template."""
        return {"version": self.glsl_version, "extensions": self.glsl_extensions}
