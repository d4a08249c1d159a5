"""Parser - turns indentation-based template source into an IR tree."""

from __future__ import annotations

import logging
import re
from typing import NoReturn

from hamlc.ast.attributes import AttributeParser
from hamlc.ast.cursor import IndentTracker, LineCursor
from hamlc.ast.node import (
    Control,
    Embedded,
    Escape,
    HtmlComment,
    HtmlCondComment,
    HtmlDoctype,
    HtmlTag,
    Interpolate,
    Multi,
    Newline,
    Node,
    Output,
    Static,
    Whitespace,
)
from hamlc.config import Options
from hamlc.exceptions import ConfigurationError, TemplateSyntaxError

log = logging.getLogger(__name__)

DOCTYPE_RE = re.compile(r"!!!\s*")
COND_COMMENT_RE = re.compile(r"/\[\s*(.*?)\s*\]\s*$")
COMMENT_RE = re.compile(r"/")
TAG_RE = re.compile(r"%([\w:-]+)")
SHORTCUT_TAG_RE = re.compile(r"(?=[.#][\w-])")
HAML_COMMENT_RE = re.compile(r"-#")
OUTPUT_RE = re.compile(r"([&!]?)=(=?)")
CONTROL_RE = re.compile(r"-")
EMBEDDED_RE = re.compile(r":(\w+)\s*$")
ESCAPED_LINE_RE = re.compile(r"\\(?![#\\])")

TAG_OUTPUT_RE = re.compile(r"\s*([&!]?)=(=?)")
TAG_EMPTY_RE = re.compile(r"\s*$")
TAG_CLOSED_RE = re.compile(r"\s*/\s*")
TAG_TEXT_RE = re.compile(r" ?")
WHITESPACE_RE = re.compile(r"[<>]{1,2}")
BROKEN_LINE_RE = re.compile(r",\s*$")

VOID_ELEMENTS = frozenset(
    "area base br col embed hr img input keygen link meta param source track wbr".split()
)

HTML4_DOCTYPES = ("strict", "frameset")
XHTML_DOCTYPES = ("strict", "frameset", "5", "1.1", "basic", "mobile", "rdfa")

TEXT_INDENT_ERROR = (
    "Text line not indented deep enough.\n"
    "The first text line defines the necessary text indentation."
)


def unclosed_interpolation(text: str) -> int | None:
    """Offset of the first ``#{`` in ``text`` without a balancing ``}``."""
    i = 0
    while i < len(text):
        if text.startswith("\\#{", i):
            i += 3
        elif text.startswith("\\\\", i):
            i += 2
        elif text.startswith("#{", i):
            depth, j = 1, i + 2
            while j < len(text) and depth:
                if text[j] == "{":
                    depth += 1
                elif text[j] == "}":
                    depth -= 1
                j += 1
            if depth:
                return i
            i = j
        else:
            i += 1
    return None


class Parser:
    """Parses template source into a ``Multi`` IR tree.

    Each line is dispatched on its leading marker. Containers that expect
    an indented block are pushed on the ``IndentTracker`` and receive the
    following, more indented, lines.
    """

    def __init__(self, options: Options | None = None, **kwargs):
        self.options = options if options is not None else Options.build(**kwargs)
        self._cursor: LineCursor | None = None
        self._tracker: IndentTracker | None = None

    def call(self, source: str | bytes) -> Multi:
        """Parse ``source`` and return the root ``Multi`` node."""
        text = self._decode(source)
        if text.startswith("\ufeff"):
            text = text[1:]

        lines = re.split(r"\r?\n", text)
        while lines and lines[-1] == "":
            lines.pop()

        result = Multi()
        self._cursor = LineCursor(lines, self.options.tab_size)
        self._tracker = IndentTracker(result, on_error=self._syntax_error)
        try:
            while self._cursor.next_line():
                self._parse_line()
        finally:
            self._cursor = None
            self._tracker = None

        log.debug("parsed %d lines", len(lines))
        return result

    parse = call

    def _decode(self, source: str | bytes) -> str:
        if isinstance(source, str):
            return source
        encoding = self.options.encoding
        try:
            return source.decode(encoding)
        except LookupError as e:
            raise ConfigurationError(f"Unknown encoding {encoding}") from e
        except UnicodeDecodeError as e:
            raise ConfigurationError(
                f"Template source is not valid {encoding}: {e.reason} at byte {e.start}"
            ) from e

    @property
    def cursor(self) -> LineCursor:
        assert self._cursor is not None
        return self._cursor

    @property
    def tracker(self) -> IndentTracker:
        assert self._tracker is not None
        return self._tracker

    def _parse_line(self) -> None:
        cursor = self.cursor
        line = cursor.line or ""
        if not line.strip():
            self.tracker.append(Newline())
            return

        indent = cursor.indent_of(line)
        cursor.skip_whitespace()
        self.tracker.enter(indent)
        self._parse_line_indicators()

    def _parse_line_indicators(self) -> None:
        cursor = self.cursor
        tracker = self.tracker

        if cursor.match(DOCTYPE_RE):
            tracker.append(self._parse_doctype(cursor.rest))
        elif m := cursor.match(COND_COMMENT_RE):
            block = Multi()
            tracker.append(HtmlCondComment(m.group(1), block))
            tracker.open(block)
        elif cursor.match(COMMENT_RE):
            self._parse_comment()
        elif m := cursor.match(TAG_RE):
            self._parse_tag(m.group(1))
        elif cursor.match(SHORTCUT_TAG_RE):
            self._parse_tag("div")
        elif cursor.rest.startswith("%"):
            self._syntax_error("Unknown line indicator")
        elif cursor.match(HAML_COMMENT_RE):
            self._parse_comment_block()
        elif m := cursor.match(OUTPUT_RE):
            block = Multi()
            tracker.append(self._output(m.group(1), m.group(2), block))
            tracker.open(block)
        elif cursor.match(CONTROL_RE):
            block = Multi()
            tracker.append(Control(self._parse_broken_line(), block))
            tracker.open(block)
        elif m := cursor.match(EMBEDDED_RE):
            tracker.append(Embedded(m.group(1), self._parse_text_block(interpolated=False)))
        else:
            cursor.match(ESCAPED_LINE_RE)
            self._check_interpolation()
            tracker.append(Interpolate(cursor.rest))

        tracker.append(Newline())

    def _output(self, modifier: str, double: str, block: Multi) -> Node:
        """Build the node for ``=``, ``==``, ``&=`` and ``!=`` output."""
        if self.cursor.at_eol:
            self._syntax_error("Expected code after output marker")
        code = self._parse_broken_line()
        if modifier == "&":
            return Escape(True, Output(True, code, block))
        if modifier == "!" or double:
            return Output(False, code, block)
        return Output(True, code, block)

    def _parse_broken_line(self) -> str:
        """Read code that continues on the next line after a trailing comma."""
        broken_line = self.cursor.rest.strip()
        while BROKEN_LINE_RE.search(broken_line):
            self._expect_next_line()
            broken_line += "\n" + self.cursor.rest.strip()
        return broken_line

    def _expect_next_line(self) -> None:
        if not self.cursor.next_line():
            self._syntax_error("Unexpected end of file")
        self.cursor.skip_whitespace()

    def _parse_tag(self, name: str) -> None:
        cursor = self.cursor
        tracker = self.tracker

        attr_parser = AttributeParser(cursor, self._syntax_error)
        tag = HtmlTag(name, attr_parser.parse())

        node: Node = tag
        if m := cursor.match(WHITESPACE_RE):
            if "<" in m.group(0):
                node = Whitespace("inner", node)
            if ">" in m.group(0):
                node = Whitespace("outer", node)
        tracker.append(node)
        for newline in attr_parser.newlines:
            tracker.append(newline)

        if (
            name in VOID_ELEMENTS
            and not cursor.at_eol
            and not TAG_CLOSED_RE.match(cursor.rest)
        ):
            cursor.skip_whitespace()
            self._syntax_error("Unexpected text after closed tag")

        if m := cursor.match(TAG_OUTPUT_RE):
            content = Multi([self._output(m.group(1), m.group(2), Multi())])
        elif cursor.match(TAG_EMPTY_RE):
            content = Multi()
        elif cursor.match(TAG_CLOSED_RE):
            if cursor.rest:
                self._syntax_error("Unexpected text after closed tag")
            return
        else:
            cursor.match(TAG_TEXT_RE)
            content = self._parse_text_block(cursor.rest)

        tag.body = content
        tracker.open(content)

    def _parse_comment(self) -> None:
        text = self.cursor.rest.strip()
        if not text:
            # The indented block below is commented out markup.
            block = Multi()
            self.tracker.append(HtmlComment(block))
            self.tracker.open(block)
            return

        body = self._parse_text_block(text)
        self.tracker.append(
            HtmlComment(Multi([Static(" "), body, Static(" ")]))
        )

    def _parse_doctype(self, text: str) -> Node:
        text = text.strip().lower()
        fmt = self.options.format

        if text.startswith("xml"):
            if fmt != "xhtml":
                return Static("")
            parts = text.split()
            encoding = parts[1] if len(parts) > 1 else "utf-8"
            return Static(f"<?xml version='1.0' encoding='{encoding}' ?>")

        if fmt == "html5":
            return HtmlDoctype("html")
        if fmt == "html4":
            return HtmlDoctype(text if text in HTML4_DOCTYPES else "transitional")
        if fmt == "xhtml":
            return HtmlDoctype(text if text in XHTML_DOCTYPES else "transitional")
        self._syntax_error("Unknown format")

    def _parse_comment_block(self) -> None:
        """Skip the lines nested below a ``-#`` comment."""
        cursor = self.cursor
        while (line := cursor.peek()) is not None and (
            not line.strip() or cursor.indent_of(line) > self.tracker.current_indent
        ):
            cursor.next_line()
            self.tracker.append(Newline())

    def _check_interpolation(self) -> None:
        """Reject an unterminated ``#{`` in the rest of the current line."""
        offset = unclosed_interpolation(self.cursor.rest)
        if offset is not None:
            self.cursor.advance(offset)
            self._syntax_error("Text interpolation: Expected closing }")

    def _parse_text_block(
        self, first_line: str | None = None, interpolated: bool = True
    ) -> Multi:
        """Collect ``first_line`` and the following, more indented, lines.

        Embedded engine bodies pass ``interpolated=False``; whether their
        text is interpolated is up to the engine.
        """
        cursor = self.cursor
        result = Multi()
        has_text = False
        if first_line and interpolated:
            self._check_interpolation()
        if first_line:
            result.append(Interpolate(first_line))
            has_text = True

        text_indent: int | None = None
        empty_lines = 0
        while (line := cursor.peek()) is not None:
            if not line.strip():
                cursor.next_line()
                result.append(Newline())
                if text_indent is not None:
                    empty_lines += 1
                continue

            indent = cursor.indent_of(line)
            if indent <= self.tracker.current_indent:
                break

            if empty_lines:
                result.append(Interpolate("\n" * empty_lines))
                empty_lines = 0

            cursor.next_line()
            cursor.skip_whitespace()

            offset = indent - text_indent if text_indent is not None else 0
            if offset < 0:
                self._syntax_error(TEXT_INDENT_ERROR)
            if interpolated:
                self._check_interpolation()

            prefix = "\n" if has_text else ""
            result.append(Newline())
            result.append(Interpolate(prefix + " " * offset + cursor.rest))
            has_text = True

            if text_indent is None:
                text_indent = indent

        return result

    def _syntax_error(self, message: str) -> NoReturn:
        cursor = self._cursor
        line = cursor.line if cursor else None
        raise TemplateSyntaxError(
            message,
            self.options.file,
            line,
            cursor.lineno if cursor else 0,
            cursor.pos if cursor and line is not None else 0,
        )
