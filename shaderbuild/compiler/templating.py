"""
The preamble (``#version`` and ``#extension`` lines) that goes at the top of
every flattened shader is rendered from a jinja2 template. The default
template ships with this package. A project can override it by putting a
template with the same name in its include root.
"""

import functools
import os

import jinja2

DEFAULT_PREAMBLE = "preamble.glsl"

builtin_loader = jinja2.PackageLoader("shaderbuild.compiler.glsl", ".")


@functools.lru_cache(maxsize=None)
def get_jinja_env(search_path=None):
    """Get the environment that loads templates from ``search_path`` first,
    and from the builtin templates second.
    """
    loader = builtin_loader
    if search_path:
        loader = jinja2.ChoiceLoader([jinja2.FileSystemLoader(search_path), loader])
    return jinja2.Environment(
        block_start_string="{$",
        block_end_string="$}",
        variable_start_string="{{",
        variable_end_string="}}",
        line_statement_prefix="$$",
        undefined=jinja2.StrictUndefined,
        loader=loader,
    )


def render_preamble(name=DEFAULT_PREAMBLE, search_path=None, **kwargs):
    """Render a preamble template into a list of lines. Blank lines are dropped."""
    env = get_jinja_env(search_path and os.fspath(search_path))
    try:
        t = env.get_template(name)
    except jinja2.TemplateNotFound as err:
        raise ValueError(f"Unknown preamble template: {err.name}") from None
    except jinja2.TemplateSyntaxError as err:
        raise ValueError(f"Invalid preamble template {err.filename}: {err}") from None
    try:
        code = t.render(**kwargs)
    except jinja2.UndefinedError as err:
        raise ValueError(f"Cannot compose preamble: {err.args[0]}") from None
    return [line.rstrip() for line in code.splitlines() if line.strip()]
