"""Attribute passes: override, sort and merge/compile attribute lists."""

from __future__ import annotations

from markupsafe import escape

from hamlc.ast.node import (
    AttrValue,
    Block,
    Capture,
    Code,
    Dynamic,
    Escape,
    HtmlAttr,
    HtmlAttrs,
    Multi,
    Newline,
    Node,
    ShortAttr,
    Static,
)
from hamlc.compiler.filter import Filter
from hamlc.exceptions import InvalidExpressionError

TRUE_LITERALS = frozenset({"True", "true"})
FALSE_LITERALS = frozenset({"False", "false", "None", "nil"})


def static_text(node: Node) -> str | None:
    """The compile-time text of an attribute value, or None if dynamic."""
    match node:
        case Static(text):
            return text
        case Newline():
            return ""
        case Multi(children):
            parts = [static_text(child) for child in children]
            if any(part is None for part in parts):
                return None
            return "".join(parts)  # type: ignore[arg-type]
        case Escape(flag, inner):
            text = static_text(inner)
            if text is None or not flag:
                return text
            return str(escape(text))
        case _:
            return None


def _sort_key(node: Node) -> str:
    match node:
        case AttrValue(_, code):
            return code
        case _:
            return static_text(node) or ""


def _attr_name(attr: Node) -> str:
    if not isinstance(attr, (HtmlAttr, ShortAttr)):
        raise InvalidExpressionError(f"Attribute is not an html attribute: {attr!r}")
    return attr.name


class AttributeOverrider(Filter):
    """Keeps only the last value of attributes listed in ``override_attrs``.

    Shortcut attributes are emitted first; the other attributes follow,
    grouped by name in the order the names first appear.
    """

    def on_html_attrs(self, entries: list[Node]) -> Node:
        override = set(self.options.override_attrs)
        shortcuts: list[Node] = []
        values: dict[str, list[Node]] = {}

        for attr in entries:
            name = _attr_name(attr)
            if isinstance(attr, ShortAttr):
                shortcuts.append(attr)
            elif name in values and name in override:
                values[name] = [attr.value]  # type: ignore[union-attr]
            else:
                values.setdefault(name, []).append(attr.value)  # type: ignore[union-attr]

        merged = [HtmlAttr(name, value) for name, vs in values.items() for value in vs]
        return HtmlAttrs([*shortcuts, *merged])


class AttributeValueSorter(Filter):
    """Moves the ``sort_attr_keys`` attributes to the end, sorted by value.

    The sort is stable, so equal values keep their source order.
    """

    def call(self, node: Node) -> Node:
        if not self.options.sort_attrs:
            return node
        return super().call(node)

    def on_html_attrs(self, entries: list[Node]) -> Node:
        keys = set(self.options.sort_attr_keys)
        passthrough: list[Node] = []
        sorted_attrs: list[Node] = []
        for attr in entries:
            if _attr_name(attr) in keys:
                sorted_attrs.append(attr)
            else:
                passthrough.append(attr)

        sorted_attrs.sort(key=lambda attr: _sort_key(attr.value))  # type: ignore[attr-defined]
        return HtmlAttrs(passthrough + sorted_attrs)


class CodeAttributes(Filter):
    """Merges repeated attributes and turns dynamic values into code.

    Names in ``merge_attrs`` join all their values with the configured
    delimiter; empty values are dropped and an empty result omits the
    attribute. A single code value of any other attribute is boolean:
    true renders ``name="name"``, false and none omit it.
    """

    def on_html_attrs(self, entries: list[Node]) -> Node:
        groups: dict[str, list[Node]] = {}
        shortcut_names: set[str] = set()
        for attr in entries:
            name = _attr_name(attr)
            if isinstance(attr, ShortAttr):
                shortcut_names.add(name)
            groups.setdefault(name, []).append(attr.value)  # type: ignore[union-attr]

        result: list[Node] = []
        for name, values in groups.items():
            delimiter = self.options.merge_attrs.get(name)
            if delimiter is None and name in shortcut_names:
                delimiter = ""
            if delimiter is not None:
                result.append(self._merge(name, values, delimiter))
            else:
                result.extend(self._single(name, value) for value in values)
        return HtmlAttrs(result)

    def _single(self, name: str, value: Node) -> Node:
        if not isinstance(value, AttrValue):
            return HtmlAttr(name, value)

        code = value.code.strip()
        if code in TRUE_LITERALS:
            return HtmlAttr(name, Static(name))
        if code in FALSE_LITERALS:
            return Multi()

        tmp = self.unique_name()
        return Multi(
            [
                Code(f"{tmp} = {value.code}"),
                Code(f"if str({tmp}) in ('True', 'true'):"),
                Block(HtmlAttr(name, Static(name))),
                Code(f"elif str({tmp}) in ('False', 'false', 'None', 'nil'):"),
                Block(Multi()),
                Code("else:"),
                Block(HtmlAttr(name, Escape(value.escape, Dynamic(tmp)))),
            ]
        )

    def _merge(self, name: str, values: list[Node], delimiter: str) -> Node:
        texts = [static_text(value) for value in values]
        if all(text is not None for text in texts):
            text = delimiter.join(text for text in texts if text)
            return HtmlAttr(name, Static(text)) if text else Multi()

        block = Multi()
        parts = []
        for value, text in zip(values, texts):
            if text is not None:
                parts.append(f"_hamlc_markup({text!r})")
            elif isinstance(value, AttrValue):
                parts.append(f"({value.code})")
            else:
                captured = self.unique_name()
                block.append(Capture(captured, value))
                parts.append(captured)

        tmp = self.unique_name()
        block.append(
            Code(f"{tmp} = _hamlc_join_attr({delimiter!r}, [{', '.join(parts)}])")
        )
        block.append(Code(f"if {tmp}:"))
        block.append(Block(HtmlAttr(name, Escape(False, Dynamic(tmp)))))
        return block
