"""Interpolation - expands ``#{...}`` placeholders in text."""

from __future__ import annotations

import re

from hamlc.ast.node import Multi, Node, Output, Static
from hamlc.compiler.filter import Filter
from hamlc.exceptions import FilterError

STATIC_RE = re.compile(r"[#\\]|[^#\\]+")
UNESCAPED_RE = re.compile(r"\A\{.*\}\Z", re.DOTALL)


class Interpolation(Filter):
    """Splits ``Interpolate`` text into ``Static`` and ``Output`` nodes.

    ``\\#{`` is a literal ``#{`` and ``\\\\`` a literal backslash. The
    code of ``#{{code}}`` is output without escaping.
    """

    def on_interpolate(self, text: str) -> Node:
        block = Multi()
        while text:
            if text.startswith("\\#{"):
                _append_static(block, "#{")
                text = text[3:]
            elif text.startswith("#{"):
                text, code = parse_expression(text[2:])
                escape = not UNESCAPED_RE.match(code)
                block.append(Output(escape, code if escape else code[1:-1], Multi()))
            elif text.startswith("\\\\"):
                _append_static(block, "\\")
                text = text[2:]
            else:
                m = STATIC_RE.match(text)
                _append_static(block, m.group(0))  # type: ignore[union-attr]
                text = text[m.end() :]  # type: ignore[union-attr]
        return block


def _append_static(block: Multi, text: str) -> None:
    if block.children and isinstance(block.children[-1], Static):
        block.children[-1] = Static(block.children[-1].text + text)
    else:
        block.append(Static(text))


def parse_expression(text: str) -> tuple[str, str]:
    """Split ``text`` after the ``}`` balancing an already consumed ``#{``.

    Returns the remaining text and the code between the braces.
    """
    count, i = 1, 0
    while i < len(text) and count != 0:
        if text[i] == "{":
            count += 1
        elif text[i] == "}":
            count -= 1
        i += 1

    if count != 0:
        raise FilterError("Text interpolation: Expected closing }")

    return text[i:], text[: i - 1]
