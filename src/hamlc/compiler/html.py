"""Html - expands the html nodes into static markup.

With ``pretty`` set, block level tags, comments and doctypes start on
a new line indented by ``indent`` spaces per nesting level.
"""

from __future__ import annotations

from hamlc.ast.node import Multi, Node, Static
from hamlc.ast.parser import VOID_ELEMENTS
from hamlc.compiler.filter import Filter, is_empty
from hamlc.exceptions import FilterError

INLINE_ELEMENTS = frozenset(
    "a abbr acronym b bdo big br button cite code dfn em i img input kbd label "
    "q samp select small span strong sub sup textarea tt var".split()
)

DOCTYPES = {
    "html5": {
        "html": "<!DOCTYPE html>",
    },
    "html4": {
        "transitional": '<!DOCTYPE HTML PUBLIC "-//W3C//DTD HTML 4.01 Transitional//EN" '
        '"http://www.w3.org/TR/html4/loose.dtd">',
        "strict": '<!DOCTYPE HTML PUBLIC "-//W3C//DTD HTML 4.01//EN" '
        '"http://www.w3.org/TR/html4/strict.dtd">',
        "frameset": '<!DOCTYPE HTML PUBLIC "-//W3C//DTD HTML 4.01 Frameset//EN" '
        '"http://www.w3.org/TR/html4/frameset.dtd">',
    },
    "xhtml": {
        "1.1": '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" '
        '"http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">',
        "5": "<!DOCTYPE html>",
        "basic": '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML Basic 1.1//EN" '
        '"http://www.w3.org/TR/xhtml-basic/xhtml-basic11.dtd">',
        "frameset": '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Frameset//EN" '
        '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-frameset.dtd">',
        "mobile": '<!DOCTYPE html PUBLIC "-//WAPFORUM//DTD XHTML Mobile 1.2//EN" '
        '"http://www.openmobilealliance.org/tech/DTD/xhtml-mobile12.dtd">',
        "rdfa": '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML+RDFa 1.0//EN" '
        '"http://www.w3.org/MarkUp/DTD/xhtml-rdfa-1.dtd">',
        "strict": '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN" '
        '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd">',
        "transitional": '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" '
        '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">',
    },
}


class Html(Filter):
    """Turns tags, attributes, comments and doctypes into ``Static`` markup."""

    def call(self, node: Node) -> Node:
        self._pretty = self.options.pretty
        self._level = 0
        self._started = False
        self._has_block = False
        self._trim_inner = False
        self._trim_outer = False
        self._trim_next = False
        return super().call(node)

    def _break(self) -> Static:
        """Line break and indentation before a block element.

        Empty at the start of the output and right after a tag with
        outer whitespace trim.
        """
        if not self._started or self._trim_next:
            self._started = True
            self._trim_next = False
            return Static("")
        return Static("\n" + " " * (self.options.indent * self._level))

    def _closing(self) -> str:
        return " />" if self.options.format == "xhtml" else ">"

    def on_html_tag(self, name: str, attrs: Node, body: Node | None) -> Node:
        trim_inner, self._trim_inner = self._trim_inner, False
        trim_outer, self._trim_outer = self._trim_outer, False
        pretty = self._pretty and name not in INLINE_ELEMENTS

        result = Multi()
        if pretty and not trim_outer:
            result.append(self._break())
        self._started = True
        self._trim_next = False
        result.append(Static(f"<{name}"))
        result.append(self.compile(attrs))

        if body is None or (name in VOID_ELEMENTS and is_empty(body)):
            result.append(Static(self._closing()))
            if body is not None:
                result.append(self.compile(body))
            self._has_block = self._has_block or pretty
            self._trim_next = trim_outer
            return result

        result.append(Static(">"))
        saved_block, saved_pretty = self._has_block, self._pretty
        self._has_block = False
        self._level += 1
        if trim_inner:
            self._pretty = False
        content = self.compile(body)
        self._level -= 1
        self._pretty = saved_pretty
        nested_block = self._has_block

        result.append(content)
        if pretty and nested_block and not trim_inner:
            result.append(self._break())
        result.append(Static(f"</{name}>"))
        self._has_block = saved_block or pretty
        self._trim_next = trim_outer
        return result

    def on_static(self, text: str) -> Node:
        if text:
            self._started = True
            self._trim_next = False
        return Static(text)

    def on_dynamic(self, code: str) -> Node:
        self._started = True
        self._trim_next = False
        return super().on_dynamic(code)

    def on_whitespace(self, kind: str, inner: Node | None) -> Node:
        if kind == "inner":
            self._trim_inner = True
        else:
            self._trim_outer = True
        result = self.compile(inner)
        return result if result is not None else Multi()

    def on_html_attrs(self, entries: list[Node]) -> Node:
        return Multi(self.compile_all(entries))

    def on_html_attr(self, name: str, value: Node) -> Node:
        quote = self.options.attr_quote
        return Multi([Static(f" {name}={quote}"), self.compile(value), Static(quote)])

    on_short_attr = on_html_attr

    def on_html_doctype(self, kind: str) -> Node:
        doctype = DOCTYPES[self.options.format].get(kind)
        if doctype is None:
            raise FilterError(f"Invalid {self.options.format} doctype {kind}")
        result = Multi()
        if self._pretty:
            result.append(self._break())
        self._started = True
        result.append(Static(doctype))
        return result

    def on_html_comment(self, inner: Node) -> Node:
        result = Multi()
        if self._pretty:
            result.append(self._break())
        self._started = True
        result.append(Static("<!--"))
        result.append(self.compile(inner))
        result.append(Static("-->"))
        self._has_block = self._has_block or self._pretty
        return result

    def on_html_cond_comment(self, condition: str, inner: Node) -> Node:
        result = Multi()
        if self._pretty:
            result.append(self._break())
        self._started = True
        result.append(Static(f"<!--[{condition}]>"))
        self._level += 1
        result.append(self.compile(inner))
        self._level -= 1
        result.append(Static("<![endif]-->"))
        self._has_block = self._has_block or self._pretty
        return result
