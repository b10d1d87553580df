"""Global configuration for pytest"""

import os

import pytest

from shaderbuild.compiler import ProcessResult


class FakeExecutor:
    """Stands in for glslangValidator. Records the commands and the flattened
    sources it gets, and writes ``output`` to the output path on success.
    """

    def __init__(self, returncode=0, stdout="", stderr="", output=b"SPIRV"):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.output = output
        self.commands = []
        self.sources = []

    def run(self, command):
        command = [str(arg) for arg in command]
        self.commands.append(command)
        input_path, output_path = command[2], command[4]
        with open(input_path, "r", encoding="utf-8") as f:
            self.sources.append(f.read())
        returncode = self.get_returncode(input_path)
        if returncode == 0 and self.output is not None:
            with open(output_path, "wb") as f:
                f.write(self.output)
        return ProcessResult(returncode, self.stdout, self.stderr)

    def get_returncode(self, input_path):
        return self.returncode


@pytest.fixture(autouse=True)
def isolated_work_dir(tmp_path, monkeypatch):
    """Write intermediate files to a temporary dir instead of the user cache dir."""
    work_dir = tmp_path / "_work"
    monkeypatch.setenv("SHADERBUILD_DATA_DIR", str(work_dir))
    for name in ("COMPILER", "INPUT_DIR", "OUTPUT_DIR", "INCLUDE_DIR"):
        monkeypatch.delenv("SHADERBUILD_" + name, raising=False)
    return work_dir


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def executor_class():
    return FakeExecutor


@pytest.fixture
def write_files(tmp_path):
    """Returns a function that writes a dict of relpath -> text under a root dir."""

    def write(files, root=None):
        root = str(root or tmp_path)
        paths = {}
        for relpath, text in files.items():
            path = os.path.join(root, *relpath.split("/"))
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            paths[relpath] = path
        return paths

    return write
