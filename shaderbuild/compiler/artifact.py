"""
The shader artifact holds the state of a single compile attempt: where the
intermediate files live, which files contributed to the flattened source,
and the diagnostics collected along the way.
"""

import os
import shutil

from ..utils import logger
from ..utils._dirs import make_attempt_dir


class ArtifactSaveError(Exception):
    """Raised when a compiled artifact cannot be copied to its destination."""


def normalize_path(path):
    """Normalize a path so that different spellings of the same file compare equal."""
    return os.path.normcase(os.path.normpath(os.path.abspath(path)))


class ShaderArtifact:
    """The record of compiling one shader.

    A fresh artifact (with a fresh work directory) is created for every
    compile attempt; it is not meant to be reused.

    Parameters
    ----------
    input_path : str
        The path to the root source file.
    suffix : str
        The suffix of the file that the compiler produces.
    work_dir : str | None
        The directory for the intermediate files. If not given, a new
        directory is created in the shaderbuild work dir.
    """

    def __init__(self, input_path, *, suffix=".spirv", work_dir=None):
        self._input_path = os.path.abspath(input_path)
        self._work_dir = work_dir or make_attempt_dir()

        basename = os.path.basename(self._input_path)
        stem, ext = os.path.splitext(basename)
        self._flattened_path = os.path.join(self._work_dir, f"{stem}.postprocess{ext}")
        self._output_path = os.path.join(self._work_dir, basename + suffix)

        self._dependent_files = []
        self._dependent_indices = {}
        self._diagnostics = ""
        self._failed = False

    def __repr__(self):
        status = "failed" if self._failed else "ok"
        return f"<ShaderArtifact {self._input_path!r} ({status})>"

    @property
    def input_path(self):
        """The absolute path of the root source file."""
        return self._input_path

    @property
    def work_dir(self):
        return self._work_dir

    @property
    def flattened_path(self):
        """The path of the flattened (include-resolved) source that is passed to the compiler."""
        return self._flattened_path

    @property
    def output_path(self):
        """The path where the compiler writes the binary."""
        return self._output_path

    @property
    def dependent_files(self):
        """The files that contributed to the flattened source. The position
        in this list is the file index that is used in ``#line`` markers.
        """
        return tuple(self._dependent_files)

    @property
    def diagnostics(self):
        """The accumulated human-readable output of all stages."""
        return self._diagnostics

    @property
    def failed(self):
        """Whether any stage failed. Cannot be reset once set."""
        return self._failed

    @failed.setter
    def failed(self, value):
        if not value and self._failed:
            raise ValueError("A failed shader artifact cannot be marked as succeeded.")
        self._failed = bool(value)

    def get_dependent_file_index(self, path):
        """Get the index for the given path, adding it if it is new."""
        path = normalize_path(path)
        try:
            return self._dependent_indices[path]
        except KeyError:
            index = len(self._dependent_files)
            self._dependent_files.append(path)
            self._dependent_indices[path] = index
            return index

    def add_diagnostic(self, text):
        if text:
            self._diagnostics += text

    def fail(self, message=None):
        """Mark this artifact as failed, optionally adding a diagnostic line."""
        self._failed = True
        if message:
            if self._diagnostics and not self._diagnostics.endswith("\n"):
                self._diagnostics += "\n"
            self._diagnostics += message + "\n"

    def save(self, save_path):
        """Copy the compiled binary to ``save_path``, creating directories as needed."""
        try:
            os.makedirs(os.path.dirname(os.path.abspath(save_path)), exist_ok=True)
            shutil.copyfile(self._output_path, save_path)
        except OSError as err:
            raise ArtifactSaveError(
                f"Unable to save '{self._output_path}' to '{save_path}': {err}"
            ) from err

    def cleanup(self):
        """Remove the intermediate files of this attempt."""
        try:
            shutil.rmtree(self._work_dir)
        except FileNotFoundError:
            pass
        except OSError as err:
            logger.warning(f"Could not remove work dir {self._work_dir}: {err}")
