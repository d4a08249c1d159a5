"""IR nodes produced by the parser and rewritten by the compiler passes.

Every node is a tagged msgspec struct, so a tree can be dumped to JSON
for inspection (``hamlc --ir``). Passes never mutate a node they
receive; they build and return new ones.
"""

from __future__ import annotations

from typing import Optional

import msgspec


class Node(msgspec.Struct, tag=True):
    """Base class of all IR nodes."""

    pass


class Multi(Node):
    """Sequential composition of child nodes."""

    children: list[Node] = msgspec.field(default_factory=list)

    def append(self, node: Node) -> None:
        self.children.append(node)


class Static(Node):
    text: str


class Dynamic(Node):
    code: str


class Code(Node):
    code: str


class Escape(Node):
    flag: bool
    inner: Node


class Newline(Node):
    pass


class HtmlAttrs(Node):
    entries: list[Node] = msgspec.field(default_factory=list)


class HtmlAttr(Node):
    name: str
    value: Node


class ShortAttr(Node):
    """Shortcut attribute (``#id``); values of the same name concatenate."""

    name: str
    value: Node


class HtmlTag(Node):
    """An element. ``body`` is None for a self-closed tag."""

    name: str
    attrs: HtmlAttrs
    body: Optional[Node] = None


class HtmlDoctype(Node):
    kind: str


class HtmlComment(Node):
    inner: Node


class HtmlCondComment(Node):
    condition: str
    inner: Node


class Control(Node):
    code: str
    body: Node


class Output(Node):
    escape: bool
    code: str
    body: Node


class Embedded(Node):
    name: str
    body: Node


class Interpolate(Node):
    text: str


class AttrValue(Node):
    escape: bool
    code: str


class Whitespace(Node):
    kind: str  # "inner" | "outer"
    inner: Optional[Node] = None


class Block(Node):
    """Indented host suite following a ``Code`` statement ending in ``:``."""

    body: Node


class Capture(Node):
    name: str
    body: Node


def dump_ir(node: Node) -> bytes:
    """Encode an IR tree as JSON."""
    return msgspec.json.encode(node)
