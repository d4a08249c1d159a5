"""Helpers available to compiled templates while they render.

Generated code refers to them through the ``_hamlc_*`` names installed
by ``namespace()``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable

from jinja2 import Environment, Template
from markupsafe import Markup, escape

_jinja = Environment(keep_trailing_newline=True, trim_blocks=True, lstrip_blocks=True)


def escape_html(value: Any) -> Markup:
    """Escape ``value`` for html; ``None`` renders as nothing."""
    if value is None:
        return Markup("")
    return escape(value)


def to_str(value: Any) -> str:
    """Plain text of an output value; markup becomes an ordinary str."""
    if value is None:
        return ""
    return str(value)


def _flatten(values: Iterable[Any]) -> Iterable[Any]:
    for value in values:
        if isinstance(value, (list, tuple)):
            yield from _flatten(value)
        else:
            yield value


def join_attr(delimiter: str, values: Iterable[Any]) -> Markup:
    """Escape and join attribute values, skipping None, False and empties."""
    parts = [
        escape(value)
        for value in _flatten(values)
        if value is not None and value is not False and to_str(value) != ""
    ]
    return Markup(escape(delimiter)).join(parts)


@lru_cache(maxsize=256)
def _jinja_template(source: str) -> Template:
    return _jinja.from_string(source)


def render_jinja(source: str, variables: dict[str, Any]) -> Markup:
    """Render a jinja template against the template's render namespace."""
    context = {
        name: value
        for name, value in variables.items()
        if not name.startswith(("__", "_hamlc_"))
    }
    return Markup(_jinja_template(source).render(context))


HELPERS = {
    "_hamlc_escape": escape_html,
    "_hamlc_str": to_str,
    "_hamlc_markup": Markup,
    "_hamlc_join_attr": join_attr,
    "_hamlc_render_jinja": render_jinja,
}


def namespace() -> dict[str, Any]:
    """A fresh global namespace for one render call."""
    return dict(HELPERS)
