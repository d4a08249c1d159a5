"""Optimizers - flatten nested ``Multi`` nodes and merge adjacent text."""

from __future__ import annotations

from hamlc.ast.node import Multi, Newline, Node, Static
from hamlc.compiler.filter import Filter


class MultiFlattener(Filter):
    """Splices nested ``Multi`` children into their parent."""

    def on_multi(self, children: list[Node]) -> Node:
        result = Multi()
        for node in self.compile_all(children):
            if isinstance(node, Multi):
                result.children.extend(node.children)
            else:
                result.append(node)
        return result


class StaticMerger(Filter):
    """Joins consecutive ``Static`` nodes of a ``Multi``.

    Line markers between merged statics are moved after the merged text,
    so the marker count never changes.
    """

    def on_multi(self, children: list[Node]) -> Node:
        result = Multi()
        text: str | None = None
        newlines = 0

        def flush() -> None:
            nonlocal text, newlines
            if text:
                result.append(Static(text))
            result.children.extend(Newline() for _ in range(newlines))
            text, newlines = None, 0

        for node in children:
            if isinstance(node, Static):
                text = (text or "") + node.text
            elif isinstance(node, Newline) and text is not None:
                newlines += 1
            else:
                flush()
                result.append(self.compile(node))
        flush()
        return result
