import os

from pytest import raises

from shaderbuild.utils.config import BuildConfig, find_compiler


def test_config_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = BuildConfig("glslangValidator")

    assert config.compiler == "glslangValidator"
    assert config.input_root == os.path.abspath("../Assets/")
    assert config.output_root == os.path.abspath("../Temp/Assets/")
    assert config.include_root == config.input_root
    assert config.extensions == (".frag", ".vert")
    assert config.watch_extensions[:2] == (".frag", ".vert")
    assert ".h" in config.watch_extensions
    assert config.artifact_suffix == ".spirv"
    assert config.template_vars == {
        "version": 450,
        "extensions": ["GL_ARB_separate_shader_objects"],
    }
    assert not config.stop_on_failure


def test_config_paths_are_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = BuildConfig("c", "src", "out", "inc")
    assert config.input_root == str(tmp_path / "src")
    assert config.output_root == str(tmp_path / "out")
    assert config.include_root == str(tmp_path / "inc")


def test_config_extensions():
    config = BuildConfig("c", extensions=["FRAG", ".comp", "frag"])
    assert config.extensions == (".frag", ".comp")

    # Watched extensions always include the compiled ones
    config = BuildConfig("c", extensions=[".comp"], watch_extensions=[".h"])
    assert config.watch_extensions == (".comp", ".h")

    config = BuildConfig("c", extensions=".vert")
    assert config.extensions == (".vert",)

    with raises(ValueError):
        BuildConfig("c", extensions=[])
    with raises(ValueError):
        BuildConfig("c", extensions=[""])
    with raises(ValueError):
        BuildConfig("c", extensions=[3])
    with raises(ValueError):
        BuildConfig("c", artifact_suffix="")


def test_config_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("SHADERBUILD_COMPILER", "/opt/vulkan/bin/glslangValidator")
    monkeypatch.setenv("SHADERBUILD_INPUT_DIR", str(tmp_path / "in"))
    monkeypatch.setenv("SHADERBUILD_OUTPUT_DIR", str(tmp_path / "out"))

    config = BuildConfig.from_env()
    assert config.compiler == "/opt/vulkan/bin/glslangValidator"
    assert config.input_root == str(tmp_path / "in")
    assert config.output_root == str(tmp_path / "out")
    assert config.include_root == str(tmp_path / "in")

    # Explicit values win, None values are ignored
    config = BuildConfig.from_env(
        input_root=str(tmp_path / "other"), output_root=None, stop_on_failure=True
    )
    assert config.input_root == str(tmp_path / "other")
    assert config.output_root == str(tmp_path / "out")
    assert config.stop_on_failure


def test_find_compiler(monkeypatch):
    monkeypatch.setenv("SHADERBUILD_COMPILER", "my-compiler")
    assert find_compiler() == "my-compiler"

    monkeypatch.delenv("SHADERBUILD_COMPILER")
    compiler = find_compiler()
    assert "glslangValidator" in os.path.basename(compiler)
