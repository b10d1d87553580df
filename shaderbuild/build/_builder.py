import os
import time

from ..utils import logger
from ..utils.config import BuildConfig
from ..compiler import VulkanShaderCompiler, ArtifactSaveError
from ._gather import gather


class ShaderBuilder:
    """Compiles all shaders in a directory tree and writes the artifacts to
    a mirrored output tree.

    Shaders are compiled one at a time, in sorted order, so that the output
    is deterministic. By default all shaders are attempted even if some fail;
    set ``config.stop_on_failure`` to abort the batch at the first failure.

    Parameters
    ----------
    config : BuildConfig | None
        The build settings. Defaults to ``BuildConfig.from_env()``.
    executor : object | None
        Object with a ``run(command)`` method to run the compiler with.
    """

    def __init__(self, config=None, *, executor=None):
        self.config = config or BuildConfig.from_env()
        self.compiler = VulkanShaderCompiler(
            self.config.compiler,
            self.config.include_root,
            executor=executor,
            artifact_suffix=self.config.artifact_suffix,
            **self.config.template_vars,
        )

    def get_save_path(self, input_path):
        """Get the artifact path for a shader, mirroring its location in the input root."""
        relpath = os.path.relpath(os.path.abspath(input_path), self.config.input_root)
        return os.path.join(self.config.output_root, relpath + self.config.artifact_suffix)

    def compile(self, input_path):
        """Compile a single shader without saving it. Returns a ShaderArtifact."""
        return self.compiler.compile(input_path)

    def build_shader(self, input_path):
        """Compile a single shader and save the result. Returns the ShaderArtifact,
        whose intermediate files have been removed.
        """
        logger.info(f"Compiling: {input_path}")
        artifact = self.compile(input_path)
        try:
            if not artifact.failed:
                try:
                    artifact.save(self.get_save_path(input_path))
                except ArtifactSaveError as err:
                    artifact.fail(str(err))
            self._report(artifact)
        finally:
            artifact.cleanup()
        return artifact

    def build_all(self):
        """Build all shaders in the input root. Returns True if all succeeded."""
        t0 = time.perf_counter()
        shaders = gather(self.config.input_root, self.config.extensions)

        succeeded = failed = 0
        for path in shaders:
            artifact = self.build_shader(path)
            if artifact.failed:
                failed += 1
                if self.config.stop_on_failure:
                    break
            else:
                succeeded += 1

        elapsed = time.perf_counter() - t0
        skipped = len(shaders) - succeeded - failed
        summary = f"{succeeded} succeeded, {failed} failed"
        if skipped:
            summary += f", {skipped} skipped"
        if failed:
            logger.error(f"Build failed: {summary} ({elapsed:0.3f}s).")
        else:
            logger.info(f"Build finished: {summary} ({elapsed:0.3f}s).")
        return not failed

    def _report(self, artifact):
        diagnostics = artifact.diagnostics.strip()
        if artifact.failed:
            msg = f"Failed to compile {artifact.input_path}"
            logger.error(msg + (":\n" + diagnostics if diagnostics else "."))
        elif diagnostics:
            logger.info(diagnostics)


def build_all(
    compiler,
    extensions,
    output_root,
    input_root,
    *,
    include_root=None,
    executor=None,
    stop_on_failure=False,
):
    """Build all shaders with one of the given extensions in ``input_root``.

    Returns True if all shaders compiled and were saved under ``output_root``.
    """
    config = BuildConfig(
        compiler,
        input_root,
        output_root,
        include_root,
        extensions=extensions,
        stop_on_failure=stop_on_failure,
    )
    return ShaderBuilder(config, executor=executor).build_all()
