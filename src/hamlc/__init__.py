"""hamlc - compiles indentation-based html templates to Python.

Usage:
    from hamlc import compile_template, render

    template = compile_template("%p Hello #{name}", escape_html=True)
    template.render({"name": "World"})       # '<p>Hello World</p>'
    render("%p= 1 + 1")                       # '<p>2</p>'
"""

from __future__ import annotations

from typing import Any, Mapping

from hamlc._version import __version__
from hamlc.compiler import CompiledTemplate, Engine, EngineRegistry
from hamlc.config import Options, load_options
from hamlc.exceptions import (
    ConfigurationError,
    EmbeddedEngineError,
    FilterError,
    HamlcError,
    InvalidExpressionError,
    TemplateSyntaxError,
)


def compile_template(source: str | bytes, **options: Any) -> CompiledTemplate:
    """Compile ``source`` with keyword ``options``."""
    return Engine(**options).compile(source)


def render(
    source: str | bytes,
    context: Any = None,
    locals: Mapping[str, Any] | None = None,
    **options: Any,
) -> str:
    """Compile and render ``source`` in one step."""
    return compile_template(source, **options).render(context, locals)


__all__ = [
    "CompiledTemplate",
    "ConfigurationError",
    "EmbeddedEngineError",
    "Engine",
    "EngineRegistry",
    "FilterError",
    "HamlcError",
    "InvalidExpressionError",
    "Options",
    "TemplateSyntaxError",
    "__version__",
    "compile_template",
    "load_options",
    "render",
]
