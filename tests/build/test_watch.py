import os
import threading
import time

from watchdog.events import (
    FileModifiedEvent,
    FileCreatedEvent,
    FileMovedEvent,
    DirModifiedEvent,
)

from shaderbuild import BuildConfig
from shaderbuild.build import ShaderWatcher


class CountingBuilder:
    """Builder that only counts how often it was asked to build."""

    def __init__(self, root, on_build=None):
        self.config = BuildConfig("glslangValidator", root, os.path.join(root, "out"))
        self.count = 0
        self.built = threading.Event()
        self.on_build = on_build

    def build_all(self):
        self.count += 1
        if self.on_build is not None:
            self.on_build()
        self.built.set()
        return True


def test_watcher_defaults(tmp_path):
    builder = CountingBuilder(str(tmp_path))
    watcher = ShaderWatcher(builder)

    assert watcher.root == str(tmp_path)
    assert ".frag" in watcher.extensions
    assert ".h" in watcher.extensions
    assert not watcher.pending


def test_handler_filters_extensions(tmp_path):
    watcher = ShaderWatcher(CountingBuilder(str(tmp_path)))
    handler = watcher.handler

    handler.dispatch(FileModifiedEvent(str(tmp_path / "notes.txt")))
    assert not watcher.pending

    handler.dispatch(DirModifiedEvent(str(tmp_path / "Shaders.frag")))
    assert not watcher.pending

    handler.dispatch(FileModifiedEvent(str(tmp_path / "Common" / "gbuffer.h")))
    assert watcher.pending


def test_handler_created_and_moved(tmp_path):
    watcher = ShaderWatcher(CountingBuilder(str(tmp_path)))

    watcher.handler.dispatch(FileCreatedEvent(str(tmp_path / "new.vert")))
    assert watcher.pending
    assert watcher.poll(0)

    # Editors that save via a rename
    watcher.handler.dispatch(
        FileMovedEvent(str(tmp_path / "lit.frag.tmp"), str(tmp_path / "lit.frag"))
    )
    assert watcher.pending


def test_events_coalesce_into_one_rebuild(tmp_path):
    builder = CountingBuilder(str(tmp_path))
    watcher = ShaderWatcher(builder)

    # Nothing happened yet
    assert not watcher.poll(0)
    assert builder.count == 0

    # Two changes in quick succession
    watcher.handler.dispatch(FileModifiedEvent(str(tmp_path / "a.frag")))
    watcher.handler.dispatch(FileModifiedEvent(str(tmp_path / "b.h")))

    assert watcher.poll(0)
    assert builder.count == 1

    assert not watcher.poll(0)
    assert builder.count == 1


def test_change_during_build_triggers_one_more_build(tmp_path):
    watcher = None

    def on_build():
        if builder.count == 1:
            for _ in range(3):
                watcher.handler.dispatch(FileModifiedEvent(str(tmp_path / "a.frag")))

    builder = CountingBuilder(str(tmp_path), on_build)
    watcher = ShaderWatcher(builder)

    watcher.request_rebuild()
    assert watcher.poll(0)
    assert watcher.poll(0)
    assert not watcher.poll(0)
    assert builder.count == 2


def test_stop_wakes_poll(tmp_path):
    builder = CountingBuilder(str(tmp_path))
    watcher = ShaderWatcher(builder)

    watcher.stop()
    assert watcher.stopped
    assert not watcher.poll(0)
    assert builder.count == 0


def test_run_until_stopped(tmp_path):
    builder = CountingBuilder(str(tmp_path))
    watcher = ShaderWatcher(builder)

    result = {}
    thread = threading.Thread(
        target=lambda: result.setdefault("ok", watcher.run(poll_interval=0.05))
    )
    thread.start()
    try:
        # The initial build
        assert builder.built.wait(10)
    finally:
        watcher.stop()
        thread.join(10)

    assert not thread.is_alive()
    assert builder.count == 1
    assert result["ok"] is True


def test_stop_before_run_returns(tmp_path):
    builder = CountingBuilder(str(tmp_path))
    watcher = ShaderWatcher(builder)
    watcher.stop()

    thread = threading.Thread(target=lambda: watcher.run(poll_interval=0.05))
    thread.start()
    thread.join(10)

    assert not thread.is_alive()
    assert builder.count == 0


def test_crashing_build_keeps_watching(tmp_path):
    def on_build():
        if builder.count == 1:
            raise RuntimeError("build crashed")

    builder = CountingBuilder(str(tmp_path), on_build)
    watcher = ShaderWatcher(builder)

    watcher.request_rebuild()
    assert watcher.poll(0)
    assert watcher.last_result is False

    watcher.request_rebuild()
    assert watcher.poll(0)
    assert watcher.last_result is True
    assert builder.count == 2


def wait_for(condition, timeout=10):
    deadline = time.perf_counter() + timeout
    while not condition():
        if time.perf_counter() > deadline:
            return False
        time.sleep(0.02)
    return True


def test_file_writes_during_build_cause_one_rebuild(tmp_path):
    started = threading.Event()
    release = threading.Event()

    def on_build():
        if builder.count == 1:
            started.set()
            release.wait(10)

    builder = CountingBuilder(str(tmp_path), on_build)
    watcher = ShaderWatcher(builder)

    thread = threading.Thread(target=lambda: watcher.run(poll_interval=0.05))
    thread.start()
    try:
        # The observer runs while the initial build is busy
        assert started.wait(10)
        (tmp_path / "a.frag").write_text("void main() {}\n")
        (tmp_path / "b.h").write_text("float b;\n")
        (tmp_path / "notes.txt").write_text("not a shader\n")

        assert wait_for(lambda: watcher.pending)
        # Give the observer time to deliver all events for these writes
        time.sleep(0.5)
        release.set()

        assert wait_for(lambda: builder.count >= 2)
        time.sleep(0.5)
        assert builder.count == 2
        assert not watcher.pending
    finally:
        release.set()
        watcher.stop()
        thread.join(10)

    assert not thread.is_alive()
