"""
Implements the shader compilers. A compiler turns one shader source file
into a ShaderArtifact: it runs the preprocessor, the external compiler and
the diagnostics remapping.
"""

from ..utils import logger
from .artifact import ShaderArtifact
from .preprocess import ShaderPreprocessor
from .executor import invoke_compiler
from .diagnostics import remap_diagnostics
from .templating import render_preamble, DEFAULT_PREAMBLE


class ShaderCompilerInterface:
    """Define what a shader compiler must look like from the pov of the builder."""

    def __init__(self, root_path=None):
        self.root_path = root_path

    def compile(self, input_path):
        """Subclasses must compile the given file and return a ShaderArtifact.

        Failures must not raise, but be reported via ``artifact.failed``
        and ``artifact.diagnostics``.
        """
        raise NotImplementedError()


class VulkanShaderCompiler(ShaderCompilerInterface):
    """Compile GLSL shaders to SPIR-V using glslangValidator.

    Parameters
    ----------
    compiler_path : str
        Path to the glslangValidator executable.
    root_path : str | None
        Root search path for includes.
    executor : object | None
        Object with a ``run(command)`` method. Defaults to a SubprocessExecutor.
    preamble_template : str
        Name of the template that produces the lines put at the top of every
        shader. A template with this name in ``root_path`` takes precedence
        over the builtin one.
    template_vars : dict
        The variables to render the preamble template with.
    """

    def __init__(
        self,
        compiler_path,
        root_path=None,
        *,
        executor=None,
        preamble_template=DEFAULT_PREAMBLE,
        artifact_suffix=".spirv",
        **template_vars,
    ):
        super().__init__(root_path)
        self.compiler_path = compiler_path
        self.executor = executor
        self.artifact_suffix = artifact_suffix
        template_vars.setdefault("version", 450)
        template_vars.setdefault("extensions", ["GL_ARB_separate_shader_objects"])
        self.preamble_template = preamble_template
        self.template_vars = template_vars
        # Fail early on a bad template or missing variables
        self.render_preamble()

    def render_preamble(self):
        """Render the preamble. This is done for every shader, so that edits
        to a preamble template in the root path are picked up while watching.
        """
        return render_preamble(
            self.preamble_template, self.root_path, **self.template_vars
        )

    def compile(self, input_path):
        artifact = ShaderArtifact(input_path, suffix=self.artifact_suffix)
        try:
            return self._compile(artifact)
        except Exception:
            # The caller never sees this artifact, so it cannot clean it up
            artifact.cleanup()
            raise

    def _compile(self, artifact):
        input_path = artifact.input_path
        try:
            preamble = self.render_preamble()
        except ValueError as err:
            artifact.fail(str(err))
            return artifact

        preprocessor = ShaderPreprocessor(self.root_path, preamble)
        if not preprocessor.process(artifact):
            return artifact

        returncode, stdout, stderr = invoke_compiler(
            self.compiler_path,
            artifact.flattened_path,
            artifact.output_path,
            self.executor,
        )

        # The compiler only knows about the flattened file, so the locations
        # it reports are in terms of the file indices set via #line.
        artifact.add_diagnostic(
            remap_diagnostics(stdout + stderr, artifact.dependent_files)
        )
        if returncode != 0:
            logger.debug(f"Compiler exited with code {returncode} for {input_path}")
            artifact.failed = True

        return artifact
