"""
Running the external compiler. The process execution is wrapped in an
executor object, so that the pipeline can be driven by a fake executor
in tests.
"""

import subprocess
from typing import NamedTuple

from ..utils import logger


class ProcessResult(NamedTuple):
    """The outcome of running an external process."""

    returncode: int
    stdout: str
    stderr: str


class SubprocessExecutor:
    """Runs commands as child processes and waits for them to finish.

    Output streams are captured and decoded. There is no timeout: a compiler
    that hangs, blocks the build.
    """

    def run(self, command):
        command = [str(arg) for arg in command]
        logger.debug("Running: " + " ".join(command))
        try:
            p = subprocess.run(command, capture_output=True, shell=False)
        except OSError as err:
            # E.g. the compiler does not exist or is not executable
            return ProcessResult(-1, "", f"Could not run '{command[0]}': {err}\n")
        return ProcessResult(
            p.returncode,
            p.stdout.decode(errors="replace"),
            p.stderr.decode(errors="replace"),
        )


def invoke_compiler(compiler_path, input_path, output_path, executor=None):
    """Compile ``input_path`` to ``output_path`` with glslangValidator.

    Returns a tuple ``(returncode, stdout, stderr)``. The output file is only
    guaranteed to exist when the returncode is zero.
    """
    executor = executor or SubprocessExecutor()
    command = [compiler_path, "-V", input_path, "-o", output_path]
    result = executor.run(command)
    return result.returncode, result.stdout, result.stderr
