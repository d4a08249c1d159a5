"""Attribute sub-parser: shortcut, ``(...)`` and ``{...}`` attribute syntax."""

from __future__ import annotations

import re
from typing import Callable, NoReturn

from hamlc.ast.cursor import LineCursor
from hamlc.ast.node import (
    AttrValue,
    Escape,
    HtmlAttr,
    HtmlAttrs,
    Interpolate,
    Newline,
    Node,
    ShortAttr,
    Static,
)

SHORTCUT_RE = re.compile(r"([.#])([\w-]+)")
ATTR_NAME = r"[\w:-]+"

# (name="value" name=code name)
HTML_QUOTED_RE = re.compile(rf"({ATTR_NAME})\s*=\s*([\"'])")
HTML_CODE_RE = re.compile(rf"({ATTR_NAME})\s*=\s*")
HTML_BOOLEAN_RE = re.compile(rf"({ATTR_NAME})")

# {:name => v, "name" => v, 'name': v, name: v}
HOST_KEY_RES = (
    re.compile(rf":({ATTR_NAME})\s*=>\s*"),
    re.compile(r'"([^"]*)"\s*(?:=>|:)\s*'),
    re.compile(r"'([^']*)'\s*(?:=>|:)\s*"),
    re.compile(rf"({ATTR_NAME}):\s+"),
    re.compile(rf"({ATTR_NAME})\s*=>\s*"),
)

OPENERS = {"(": ")", "[": "]", "{": "}"}


class AttributeParser:
    """Parses the attributes following a tag name into an ``HtmlAttrs`` node.

    Attribute lists may continue on the following lines; each consumed
    continuation line is recorded so the parser can keep line markers
    aligned.
    """

    def __init__(self, cursor: LineCursor, on_error: Callable[[str], NoReturn]):
        self.cursor = cursor
        self._error = on_error
        self.newlines: list[Node] = []

    def parse(self) -> HtmlAttrs:
        attrs = HtmlAttrs()
        self.newlines = []

        while m := self.cursor.match(SHORTCUT_RE):
            marker, value = m.group(1), m.group(2)
            if marker == "#":
                attrs.entries.append(ShortAttr("id", Static(value)))
            else:
                attrs.entries.append(HtmlAttr("class", Static(value)))

        if self.cursor.match(r"\("):
            self._parse_html_list(attrs)
        elif self.cursor.match(r"\{"):
            self._parse_host_list(attrs)

        return attrs

    def _continue(self, delimiter: str) -> None:
        """Move on to the next line of a multi-line attribute list."""
        if self.cursor.peek() is None:
            self._error(f"Expected closing delimiter {delimiter}")
        self.cursor.next_line()
        self.cursor.skip_whitespace()
        self.newlines.append(Newline())

    def _parse_html_list(self, attrs: HtmlAttrs) -> None:
        cursor = self.cursor
        while True:
            cursor.skip_whitespace()
            if cursor.at_eol:
                self._continue(")")
                continue
            if cursor.match(r"\)"):
                return

            if m := cursor.match(HTML_QUOTED_RE):
                value = self._scan_quoted(m.group(2))
                attrs.entries.append(
                    HtmlAttr(m.group(1), Escape(True, Interpolate(value)))
                )
            elif m := cursor.match(HTML_CODE_RE):
                code = self._scan_code(" \t)")
                attrs.entries.append(HtmlAttr(m.group(1), AttrValue(True, code)))
            elif m := cursor.match(HTML_BOOLEAN_RE):
                attrs.entries.append(HtmlAttr(m.group(1), AttrValue(True, "True")))
            else:
                self._error("Expected closing delimiter )")

    def _parse_host_list(self, attrs: HtmlAttrs) -> None:
        cursor = self.cursor
        while True:
            cursor.match(r"[\s,]*")
            if cursor.at_eol:
                self._continue("}")
                continue
            if cursor.match(r"\}"):
                return

            name = None
            for key_re in HOST_KEY_RES:
                if m := cursor.match(key_re):
                    name = m.group(1)
                    break
            if name is None:
                self._error("Expected closing delimiter }")

            if m := cursor.match(r"[\"']"):
                value = self._scan_quoted(m.group(0))
                # A quoted value must end the entry.
                if not cursor.match(r"\s*(?=[,}]|$)"):
                    self._error("Expected closing delimiter }")
                attrs.entries.append(HtmlAttr(name, Escape(True, Interpolate(value))))
            else:
                code = self._scan_code(",}")
                if not code:
                    self._error("Expected attribute value")
                attrs.entries.append(HtmlAttr(name, AttrValue(True, code)))

    def _scan_quoted(self, quote: str) -> str:
        """Consume up to the closing ``quote``; ``#{...}`` may contain quotes."""
        cursor = self.cursor
        text = cursor.rest
        depth = 0
        i = 0
        while i < len(text):
            ch = text[i]
            if ch == "\\" and i + 1 < len(text):
                i += 2
                continue
            if depth == 0 and text.startswith("#{", i):
                depth = 1
                i += 2
                continue
            if depth > 0 and ch == "{":
                depth += 1
            elif depth > 0 and ch == "}":
                depth -= 1
            elif depth == 0 and ch == quote:
                cursor.advance(i + 1)
                return text[:i]
            i += 1

        self._error(f"Expected closing quote {quote}")

    def _scan_code(self, terminators: str) -> str:
        """Consume a host expression up to a terminator at bracket depth 0."""
        cursor = self.cursor
        text = cursor.rest
        stack: list[str] = []
        quote: str | None = None
        i = 0
        while i < len(text):
            ch = text[i]
            if quote:
                if ch == "\\":
                    i += 1
                elif ch == quote:
                    quote = None
            elif ch in "\"'":
                quote = ch
            elif ch in OPENERS:
                stack.append(OPENERS[ch])
            elif stack and ch == stack[-1]:
                stack.pop()
            elif not stack and ch in terminators:
                break
            i += 1

        if quote or stack:
            self._error(f"Expected closing delimiter {stack[-1] if stack else quote}")

        cursor.advance(i)
        return text[:i].strip()
