"""
Utility functions for shaderbuild.

.. currentmodule:: shaderbuild.utils

.. autosummary::
    :toctree: utils/
    :template: ../_templates/custom_layout.rst

    config.BuildConfig
    get_work_dir

"""

import os
import logging

from ._dirs import get_work_dir  # noqa: F401

logger = logging.getLogger("shaderbuild")


def _set_log_level():
    # Set default level
    logger.setLevel(logging.WARN)
    # Set user-specified level
    level = os.getenv("SHADERBUILD_LOG_LEVEL", "")
    if level:
        try:
            if level.isnumeric():
                logger.setLevel(int(level))
            else:
                logger.setLevel(level.upper())
        except Exception:
            logger.warning(f"Invalid shaderbuild log level: {level}")


_set_log_level()
