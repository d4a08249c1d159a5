"""Escapable - applies the escape flags to static text and dynamic output."""

from __future__ import annotations

from markupsafe import escape

from hamlc.ast.node import Capture, Dynamic, Node, Static
from hamlc.compiler.filter import Filter


class Escapable(Filter):
    """Removes ``Escape`` wrappers.

    Inside ``Escape(True, ...)`` static text is escaped while compiling
    and dynamic output is wrapped in ``_hamlc_escape``. Outside any
    wrapper, dynamic output follows the ``escape_html`` option and static
    text is left as is.
    """

    def call(self, node: Node) -> Node:
        self._escape: bool | None = None
        return super().call(node)

    def on_escape(self, flag: bool, inner: Node) -> Node:
        saved, self._escape = self._escape, flag
        try:
            return self.compile(inner)
        finally:
            self._escape = saved

    def on_capture(self, name: str, body: Node) -> Node:
        # A captured block is markup of its own.
        saved, self._escape = self._escape, None
        try:
            return Capture(name, self.compile(body))
        finally:
            self._escape = saved

    def on_static(self, text: str) -> Node:
        if self._escape:
            return Static(str(escape(text)))
        return Static(text)

    def on_dynamic(self, code: str) -> Node:
        flag = self.options.escape_html if self._escape is None else self._escape
        if flag:
            return Dynamic(f"_hamlc_escape(({code}))")
        return Dynamic(code)
