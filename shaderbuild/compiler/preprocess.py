"""
Resolve ``#include "path"`` directives into a single flattened source.

GLSL has no ``#line <nr> "<file>"`` form, only ``#line <nr> <source-string-number>``.
Each file that contributes to the flattened source therefore gets a small
integer (its index in ``ShaderArtifact.dependent_files``), and the expanded
text is interleaved with ``#line`` markers so that the compiler reports
errors as ``<index>:<line>``. The diagnostics module maps these back to paths.
"""

import os
import re

from ..utils import logger
from .artifact import normalize_path
from .templating import render_preamble


class PreprocessorError(Exception):
    """Base class for errors that abort the preprocessing of a shader."""


class IncludeNotFoundError(PreprocessorError):
    """An included file could not be found in any of the search locations."""


class MalformedIncludeError(PreprocessorError):
    """An include directive without a properly quoted path."""


class CircularIncludeError(PreprocessorError):
    """A file (indirectly) includes itself."""


re_include = re.compile(r"^\s*#include(?=[\s\"]|$)")


def parse_include(line):
    """Get the quoted path of an include directive, or None if the line is
    not an include directive. Raises MalformedIncludeError if the path is
    not properly quoted.
    """
    match = re_include.match(line)
    if not match:
        return None
    start_quote = line.find('"', match.end())
    if start_quote < 0:
        raise MalformedIncludeError("#include directive has invalid syntax.")
    end_quote = line.find('"', start_quote + 1)
    if end_quote < 0:
        raise MalformedIncludeError("#include directive has invalid syntax.")
    return line[start_quote + 1 : end_quote]


class ShaderPreprocessor:
    """Flattens a shader and its includes into one source.

    Parameters
    ----------
    root_path : str | None
        The search path that is tried last when resolving includes.
    preamble : list | None
        The lines to put at the top of the flattened source. By default
        the builtin ``preamble.glsl`` template is rendered for GLSL 450.
    """

    def __init__(self, root_path=None, preamble=None):
        self.root_path = root_path
        if preamble is None:
            preamble = render_preamble(
                version=450, extensions=["GL_ARB_separate_shader_objects"]
            )
        self.preamble = list(preamble)

    def process(self, artifact):
        """Flatten the artifact's input file and write the result to
        ``artifact.flattened_path``. Returns whether this succeeded. Nothing
        is written on failure.
        """
        text, ok = self.expand(artifact)
        if not ok:
            return False
        with open(artifact.flattened_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        return True

    def expand(self, artifact, file_path=None):
        """Expand the given file (the artifact's input file by default),
        prefixed with the preamble.

        Returns a tuple ``(text, ok)``. On failure the text is empty, the
        artifact is marked as failed and the reason is added to its diagnostics.
        """
        if file_path is None:
            file_path = artifact.input_path
        try:
            text = self._expand_file(artifact, os.path.abspath(file_path), [])
        except PreprocessorError as err:
            artifact.fail(str(err))
            return "", False
        lines = [line + "\n" for line in self.preamble]
        return "".join(lines) + text, True

    def resolve_include(self, include, including_file):
        """Find the file for an include directive. Tries the path as-is
        (when absolute), relative to the including file, and relative to the
        root path, in that order.
        """
        candidates = []
        if os.path.isabs(include):
            candidates.append(include)
        candidates.append(os.path.join(os.path.dirname(including_file), include))
        if self.root_path:
            candidates.append(os.path.join(self.root_path, include))

        for path in candidates:
            if os.path.isfile(path):
                return os.path.abspath(path)
        raise IncludeNotFoundError(f"Unable to find included path '{candidates[-1]}'.")

    def _expand_file(self, artifact, path, stack):
        key = normalize_path(path)
        if key in stack:
            chain = " -> ".join(stack[stack.index(key) :] + [key])
            raise CircularIncludeError(f"Circular include detected: {chain}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except OSError as err:
            raise PreprocessorError(
                f"Unable to read '{path}': {err.strerror or err}"
            ) from None
        except UnicodeDecodeError as err:
            raise PreprocessorError(
                f"Unable to read '{path}': not valid UTF-8 ({err.reason} at byte {err.start})"
            ) from None

        index = artifact.get_dependent_file_index(path)

        stack.append(key)
        parts = [f"#line 1 {index}\n"]
        for linenr, line in enumerate(lines, 1):
            try:
                include = parse_include(line)
                if include is None:
                    parts.append(line + "\n")
                    continue
                logger.debug(f"Including: {include}")
                include_path = self.resolve_include(include, path)
            except PreprocessorError as err:
                raise type(err)(f"{path}({linenr}): {err}") from None
            parts.append(self._expand_file(artifact, include_path, stack))
            parts.append(f"#line {linenr + 1} {index}\n")
        stack.pop()

        return "".join(parts)
