"""Base class of the compiler passes.

A pass is a tree-in/tree-out transform. ``Filter.compile`` matches the
node type and calls the ``on_<tag>`` handler; every default handler
rebuilds the node with compiled children, so a pass only overrides
the handlers for the nodes it rewrites.
"""

from __future__ import annotations

from typing import Any

from hamlc.ast.node import (
    AttrValue,
    Block,
    Capture,
    Code,
    Control,
    Dynamic,
    Embedded,
    Escape,
    HtmlAttr,
    HtmlAttrs,
    HtmlComment,
    HtmlCondComment,
    HtmlDoctype,
    HtmlTag,
    Interpolate,
    Multi,
    Newline,
    Node,
    Output,
    ShortAttr,
    Static,
    Whitespace,
)
from hamlc.config import Options
from hamlc.exceptions import InvalidExpressionError


class Filter:
    """Pass-through tree transform."""

    def __init__(self, options: Options | None = None, **kwargs: Any):
        if options is None:
            options = Options.build(**kwargs)
        elif kwargs:
            options = options.merged(**kwargs)
        self.options = options
        self._uniq = 0

    def call(self, node: Node) -> Node:
        """Run the pass over a whole tree."""
        self._uniq = 0
        return self.compile(node)

    __call__ = call

    def unique_name(self) -> str:
        """A temporary variable name unique within one ``call``."""
        self._uniq += 1
        return f"_hamlc_{type(self).__name__.lower()}{self._uniq}"

    def compile(self, node: Node | None) -> Any:
        match node:
            case None:
                return None
            case Multi(children):
                return self.on_multi(children)
            case Static(text):
                return self.on_static(text)
            case Dynamic(code):
                return self.on_dynamic(code)
            case Code(code):
                return self.on_code(code)
            case Newline():
                return self.on_newline()
            case Escape(flag, inner):
                return self.on_escape(flag, inner)
            case HtmlTag(name, attrs, body):
                return self.on_html_tag(name, attrs, body)
            case HtmlAttrs(entries):
                return self.on_html_attrs(entries)
            case HtmlAttr(name, value):
                return self.on_html_attr(name, value)
            case ShortAttr(name, value):
                return self.on_short_attr(name, value)
            case HtmlDoctype(kind):
                return self.on_html_doctype(kind)
            case HtmlComment(inner):
                return self.on_html_comment(inner)
            case HtmlCondComment(condition, inner):
                return self.on_html_cond_comment(condition, inner)
            case Control(code, body):
                return self.on_control(code, body)
            case Output(escape, code, body):
                return self.on_output(escape, code, body)
            case Embedded(name, body):
                return self.on_embedded(name, body)
            case Interpolate(text):
                return self.on_interpolate(text)
            case AttrValue(escape, code):
                return self.on_attr_value(escape, code)
            case Whitespace(kind, inner):
                return self.on_whitespace(kind, inner)
            case Block(body):
                return self.on_block(body)
            case Capture(name, body):
                return self.on_capture(name, body)
            case _:
                raise InvalidExpressionError(f"Unknown expression {node!r}")

    def compile_all(self, nodes: list[Node]) -> list[Node]:
        compiled = (self.compile(node) for node in nodes)
        return [node for node in compiled if node is not None]

    # Pass-through handlers

    def on_multi(self, children: list[Node]) -> Node:
        return Multi(self.compile_all(children))

    def on_static(self, text: str) -> Node:
        return Static(text)

    def on_dynamic(self, code: str) -> Node:
        return Dynamic(code)

    def on_code(self, code: str) -> Node:
        return Code(code)

    def on_newline(self) -> Node:
        return Newline()

    def on_escape(self, flag: bool, inner: Node) -> Node:
        return Escape(flag, self.compile(inner))

    def on_html_tag(self, name: str, attrs: HtmlAttrs, body: Node | None) -> Node:
        return HtmlTag(name, self.compile(attrs), self.compile(body))

    def on_html_attrs(self, entries: list[Node]) -> Node:
        return HtmlAttrs(self.compile_all(entries))

    def on_html_attr(self, name: str, value: Node) -> Node:
        return HtmlAttr(name, self.compile(value))

    def on_short_attr(self, name: str, value: Node) -> Node:
        return ShortAttr(name, self.compile(value))

    def on_html_doctype(self, kind: str) -> Node:
        return HtmlDoctype(kind)

    def on_html_comment(self, inner: Node) -> Node:
        return HtmlComment(self.compile(inner))

    def on_html_cond_comment(self, condition: str, inner: Node) -> Node:
        return HtmlCondComment(condition, self.compile(inner))

    def on_control(self, code: str, body: Node) -> Node:
        return Control(code, self.compile(body))

    def on_output(self, escape: bool, code: str, body: Node) -> Node:
        return Output(escape, code, self.compile(body))

    def on_embedded(self, name: str, body: Node) -> Node:
        return Embedded(name, self.compile(body))

    def on_interpolate(self, text: str) -> Node:
        return Interpolate(text)

    def on_attr_value(self, escape: bool, code: str) -> Node:
        return AttrValue(escape, code)

    def on_whitespace(self, kind: str, inner: Node | None) -> Node:
        return Whitespace(kind, self.compile(inner))

    def on_block(self, body: Node) -> Node:
        return Block(self.compile(body))

    def on_capture(self, name: str, body: Node) -> Node:
        return Capture(name, self.compile(body))


def is_empty(node: Node | None) -> bool:
    """True if ``node`` produces nothing but line markers."""
    match node:
        case None | Newline():
            return True
        case Multi(children):
            return all(is_empty(child) for child in children)
        case _:
            return False
