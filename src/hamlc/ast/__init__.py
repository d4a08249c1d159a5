"""hamlc.ast - template parser and the IR it produces."""

from hamlc.ast.node import (
    AttrValue,
    Block,
    Capture,
    Code,
    Control,
    Dynamic,
    Embedded,
    Escape,
    HtmlAttr,
    HtmlAttrs,
    HtmlComment,
    HtmlCondComment,
    HtmlDoctype,
    HtmlTag,
    Interpolate,
    Multi,
    Newline,
    Node,
    Output,
    ShortAttr,
    Static,
    Whitespace,
    dump_ir,
)
from hamlc.ast.parser import Parser

__all__ = [
    "AttrValue",
    "Block",
    "Capture",
    "Code",
    "Control",
    "Dynamic",
    "Embedded",
    "Escape",
    "HtmlAttr",
    "HtmlAttrs",
    "HtmlComment",
    "HtmlCondComment",
    "HtmlDoctype",
    "HtmlTag",
    "Interpolate",
    "Multi",
    "Newline",
    "Node",
    "Output",
    "Parser",
    "ShortAttr",
    "Static",
    "Whitespace",
    "dump_ir",
]
