"""
Versioning for shaderbuild. We use a hard-coded version number, and for dev
installs (a git checkout) we add extra versioning info.
"""

import logging
import subprocess
from pathlib import Path


# This is the reference version number, to be bumped before each release.
__version__ = "0.1.0"


logger = logging.getLogger("shaderbuild")

# Get whether this is a repo. If so, repo_dir is the path, otherwise repo_dir is None.
repo_dir = Path(__file__).parents[1]
repo_dir = repo_dir if repo_dir.joinpath(".git").is_dir() else None


def get_version():
    """Get the version string."""
    if not repo_dir:
        return __version__

    release, post, labels = get_version_info_from_git()
    version = release or __version__
    if post and post != "0":
        version += f".post{post}"
    if labels:
        version += "+" + ".".join(labels)
    return version


def get_version_info_from_git():
    """Get (release, post, labels) from ``git describe``.

    With `release` the version number from the latest tag, `post` the
    number of commits since that tag, and `labels` a list with the
    git-hash and optionally a dirty flag.
    """
    command = ["git", "describe", "--long", "--always", "--tags", "--dirty"]
    try:
        p = subprocess.run(command, cwd=repo_dir, capture_output=True)
    except OSError as e:
        logger.warning("Could not get shaderbuild version: " + str(e))
        return None, None, []

    if p.returncode:
        logger.warning(
            "Could not get shaderbuild version: " + p.stderr.decode(errors="ignore")
        )
        return None, None, []

    parts = p.stdout.decode(errors="ignore").strip().lstrip("v").split("-")
    if len(parts) <= 2:
        # No tags (and thus also no post). Only git hash and maybe 'dirty'
        return None, None, parts
    release, post, *labels = parts
    return release, post, labels


def _version_info_from_string(version):
    info = []
    for part in version.split("+")[0].split("."):
        try:
            info.append(int(part))
        except ValueError:
            info.append(part)
    return tuple(info)


__version__ = get_version()
version_info = _version_info_from_string(__version__)
