"""Line cursor and indentation tracking used by the parser."""

from __future__ import annotations

import re
from typing import Callable, NoReturn

from hamlc.ast.node import Multi, Node

_INDENT_RE = re.compile(r"[ \t]*")


class LineCursor:
    """Walks the source lines and the unconsumed part of the current line.

    The current line is never modified; ``pos`` is the offset of the
    first unconsumed character and doubles as the error column.
    """

    def __init__(self, lines: list[str], tab_size: int = 4):
        self._lines = lines
        self._next = 0
        self.tab_size = max(tab_size, 1)
        self.lineno = 0
        self.line: str | None = None
        self.pos = 0

    def next_line(self) -> bool:
        if self._next >= len(self._lines):
            self.line = None
            self.pos = 0
            return False
        self.line = self._lines[self._next]
        self._next += 1
        self.lineno += 1
        self.pos = 0
        return True

    def peek(self) -> str | None:
        """The next unread line, without consuming it."""
        if self._next >= len(self._lines):
            return None
        return self._lines[self._next]

    @property
    def rest(self) -> str:
        if self.line is None:
            return ""
        return self.line[self.pos :]

    @property
    def at_eol(self) -> bool:
        return not self.rest.strip()

    def match(self, pattern: str | re.Pattern[str]) -> re.Match[str] | None:
        """Match ``pattern`` at the cursor and consume it on success."""
        if self.line is None:
            return None
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        m = regex.match(self.line, self.pos)
        if m:
            self.pos = m.end()
        return m

    def advance(self, count: int) -> None:
        self.pos = min(self.pos + count, len(self.line or ""))

    def skip_whitespace(self) -> None:
        rest = self.rest
        self.pos += len(rest) - len(rest.lstrip())

    def indent_of(self, line: str) -> int:
        """Indent width of ``line`` with tabs expanded to the tab size."""
        leading = _INDENT_RE.match(line).group(0)  # type: ignore[union-attr]
        return len(leading.expandtabs(self.tab_size))


class IndentTracker:
    """Stack of indent widths and the parallel stack of open containers.

    There is one more container than indent while the last line opened
    a block that has not received its first indented child yet.
    """

    def __init__(self, root: Multi, on_error: Callable[[str], NoReturn]):
        self.indents: list[int] = [0]
        self.stacks: list[Multi] = [root]
        self._on_error = on_error

    @property
    def expecting_indent(self) -> bool:
        return len(self.stacks) > len(self.indents)

    @property
    def current_indent(self) -> int:
        return self.indents[-1]

    @property
    def top(self) -> Multi:
        return self.stacks[-1]

    def append(self, node: Node) -> None:
        self.top.append(node)

    def open(self, container: Multi) -> None:
        """Make ``container`` receive the next, more indented, lines."""
        self.stacks.append(container)

    def enter(self, indent: int) -> None:
        """Adjust the stacks for a line indented ``indent`` columns."""
        expecting = self.expecting_indent

        if indent > self.indents[-1]:
            if not expecting:
                self._on_error("Unexpected indentation")
            self.indents.append(indent)
            return

        # The block opened by the previous line stays empty.
        if expecting:
            self.stacks.pop()

        while indent < self.indents[-1]:
            self.indents.pop()
            self.stacks.pop()

        if indent != self.indents[-1]:
            self._on_error("Malformed indentation")
