import os
import sys
import atexit
import shutil
import tempfile


try:
    HOME = os.path.expanduser("~")
except Exception:  # Exceptions thrown by home() are not specified...
    HOME = "/home"  # Just an arbitrary path


def get_work_dir():
    """Get the path where intermediate build files (flattened sources and
    compiler output) are written.
    """
    return _get_data_dir("cache")


def make_attempt_dir():
    """Create a fresh directory for a single compile attempt."""
    return tempfile.mkdtemp(prefix="attempt-", dir=get_work_dir())


def _get_data_dir(xdg_name):
    # Set by user
    dir = os.getenv("SHADERBUILD_DATA_DIR")
    if dir:
        dir = os.path.abspath(dir)
        os.makedirs(dir, exist_ok=True)
        return dir

    # Get user dir
    user_dir = os.path.expanduser("~")
    if not os.path.isdir(user_dir):
        user_dir = "/var/tmp"

    # Get base cache dir
    base_dir = None
    if sys.platform.startswith("win"):
        base_dir = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA")
    elif sys.platform.startswith("darwin"):
        base_dir = os.path.join(user_dir, "Library", "Caches")
    elif sys.platform.startswith(("linux", "freebsd")):
        # https://specifications.freedesktop.org/basedir-spec/basedir-spec-latest.html
        path1 = os.getenv(f"XDG_{xdg_name.upper()}_HOME")
        path2 = os.path.join(HOME, "." + xdg_name.lower())
        base_dir = path1 or path2

    # Fall back to user dir
    if not (base_dir and os.path.isdir(base_dir)):
        base_dir = user_dir

    # Make directory for shaderbuild
    dir = os.path.join(
        base_dir, ".shaderbuild" if base_dir == user_dir else "shaderbuild"
    )
    try:
        os.makedirs(dir, exist_ok=True)
        if not (os.access(dir, os.W_OK) and os.path.isdir(dir)):
            raise OSError()
    except OSError:
        # If the cache directory cannot be created or is not writable,
        # use a temporary one for the lifetime of the process.
        dir = os.environ["SHADERBUILD_DATA_DIR"] = tempfile.mkdtemp(
            prefix="shaderbuild-"
        )
        atexit.register(shutil.rmtree, dir, True)

    return dir
