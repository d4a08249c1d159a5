"""Control structures - lowers ``Control`` and ``Output`` nodes."""

from __future__ import annotations

import re

from hamlc.ast.node import Block, Capture, Code, Dynamic, Escape, Multi, Node
from hamlc.compiler.filter import Filter, is_empty

# Statements that introduce an indented suite.
BLOCK_KEYWORDS = frozenset(
    {
        "async",
        "class",
        "case",
        "def",
        "elif",
        "else",
        "except",
        "finally",
        "for",
        "if",
        "match",
        "try",
        "while",
        "with",
    }
)
KEYWORD_RE = re.compile(r"\A\s*(\w+)")

# Local name a nested output block is captured into.
CAPTURE_NAME = "block"


def opens_block(code: str) -> bool:
    """True if the statement ``code`` needs an indented suite."""
    if code.rstrip().endswith(":"):
        return True
    m = KEYWORD_RE.match(code)
    return bool(m) and m.group(1) in BLOCK_KEYWORDS


def suite_header(code: str) -> str:
    code = code.rstrip()
    return code if code.endswith(":") else f"{code}:"


class ControlStructures(Filter):
    """Turns control lines into ``Code`` statements and output into ``Dynamic``.

    A statement such as ``if show`` is completed to ``if show:`` and its
    body becomes an indented ``Block``. An output line with a nested block
    renders the block first and binds it to ``block``, unless the
    ``disable_capture`` option is set.
    """

    def on_control(self, code: str, body: Node) -> Node:
        if opens_block(code):
            return Multi([Code(suite_header(code)), Block(self.compile(body))])
        return Multi([Code(code), self.compile(body)])

    def on_output(self, escape: bool, code: str, body: Node) -> Node:
        dynamic = Dynamic(code) if escape else Escape(False, Dynamic(code))
        if is_empty(body) or self.options.disable_capture:
            return Multi([dynamic, self.compile(body)])
        captured = self.unique_name()
        return Multi(
            [
                Capture(captured, self.compile(body)),
                Code(f"{CAPTURE_NAME} = {captured}"),
                dynamic,
            ]
        )
