import os

from ..utils import logger


def gather(root_path, extensions):
    """Get a sorted list of all files under ``root_path`` (recursively) that
    have one of the given extensions. Extensions are compared case-insensitive.
    """
    extensions = tuple(ext.lower() for ext in extensions)
    root_path = os.path.abspath(root_path)
    if not os.path.isdir(root_path):
        logger.warning(f"Shader directory does not exist: {root_path}")
        return []

    files = []
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames.sort()
        for filename in filenames:
            if os.path.splitext(filename)[1].lower() in extensions:
                files.append(os.path.join(dirpath, filename))
    return sorted(files)
