"""
Building a tree of shaders, once or continuously.

.. currentmodule:: shaderbuild.build

.. autosummary::
    :toctree: build/
    :template: ../_templates/custom_layout.rst

    gather
    build_all
    ShaderBuilder
    ShaderWatcher

"""

from ._gather import gather  # noqa
from ._builder import ShaderBuilder, build_all  # noqa
from ._watch import ShaderWatcher, ShaderChangeHandler  # noqa
