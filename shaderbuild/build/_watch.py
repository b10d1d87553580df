"""
Rebuild shaders when their sources change.

The watchdog observer calls the event handler from its own thread. The
handler does nothing but set a flag (a threading.Event). The builder thread
waits for that flag, clears it, and rebuilds everything. Any number of
changes that happen before the flag is cleared thus result in a single
rebuild, and changes during a rebuild result in exactly one more.
"""

import os
import threading

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

from ..utils import logger


class ShaderChangeHandler(FileSystemEventHandler):
    """Sets ``pending`` when a file with one of the given extensions changes."""

    def __init__(self, extensions, pending):
        super().__init__()
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.pending = pending

    def _check_path(self, path):
        path = os.fsdecode(path)
        if os.path.splitext(path)[1].lower() in self.extensions:
            logger.debug(f"Detected change: {path}")
            self.pending.set()

    def on_modified(self, event):
        if not event.is_directory:
            self._check_path(event.src_path)

    def on_created(self, event):
        if not event.is_directory:
            self._check_path(event.src_path)

    def on_moved(self, event):
        # Editors often save by writing a temp file and renaming it
        if not event.is_directory:
            self._check_path(event.dest_path)


class ShaderWatcher:
    """Watch a directory tree and rebuild all shaders when a source changes.

    Parameters
    ----------
    builder : ShaderBuilder
        The builder to call ``build_all()`` on.
    root : str | None
        The directory to watch. Defaults to the builder's input root.
    extensions : tuple | None
        The extensions of the files to watch. Defaults to the builder's
        watched extensions, which include header files that are not compiled
        by themselves.
    """

    def __init__(self, builder, root=None, extensions=None):
        self.builder = builder
        self.root = os.path.abspath(root or builder.config.input_root)
        self.extensions = tuple(extensions or builder.config.watch_extensions)
        self._pending = threading.Event()
        self._stopped = threading.Event()
        self.handler = ShaderChangeHandler(self.extensions, self._pending)
        self._observer = None
        self.last_result = None

    @property
    def pending(self):
        """Whether a rebuild has been requested but not started yet."""
        return self._pending.is_set()

    @property
    def stopped(self):
        return self._stopped.is_set()

    def request_rebuild(self):
        self._pending.set()

    def start(self):
        """Start watching the file system (in a background thread). Does
        nothing once ``stop()`` has been called: a watcher is not restartable.
        """
        if self._observer is not None or self._stopped.is_set():
            return
        self._observer = Observer()
        self._observer.schedule(self.handler, self.root, recursive=True)
        self._observer.start()
        logger.info(f"Watching {self.root} for changes.")

    def stop(self):
        """Stop watching. Wakes up a ``run()`` or ``poll()`` that is waiting,
        and makes a later ``run()`` return right away.
        """
        self._stopped.set()
        self._pending.set()
        if self._observer is not None:
            self._observer.stop()

    def join(self, timeout=None):
        if self._observer is not None:
            self._observer.join(timeout)
            self._observer = None

    def poll(self, timeout=None):
        """Wait for a change and rebuild. Returns whether a rebuild was done."""
        if not self._pending.wait(timeout):
            return False
        self._pending.clear()
        if self._stopped.is_set():
            return False
        logger.info("Change detected, rebuilding shaders.")
        self._build()
        return True

    def run(self, initial_build=True, poll_interval=1.0):
        """Build, then rebuild on every change until ``stop()`` is called or
        the process is interrupted. Returns the result of the last build.
        """
        if self._stopped.is_set():
            return self.last_result
        self.start()
        try:
            if initial_build and not self._stopped.is_set():
                self._build()
            # Wait with a timeout so that Ctrl+C gets through on all platforms
            while not self._stopped.is_set():
                self.poll(poll_interval)
        except KeyboardInterrupt:
            logger.info("Interrupted, no longer watching.")
        finally:
            self.stop()
            self.join()
        return self.last_result

    def _build(self):
        # A crashing build must not end the watch session
        try:
            self.last_result = self.builder.build_all()
        except Exception as err:
            logger.exception(f"Build crashed: {err}")
            self.last_result = False
