"""Tests for the template parser."""

import pytest

from hamlc.ast import (
    AttrValue,
    Control,
    Embedded,
    Escape,
    HtmlAttr,
    HtmlAttrs,
    HtmlComment,
    HtmlDoctype,
    HtmlTag,
    Interpolate,
    Multi,
    Newline,
    Output,
    Parser,
    ShortAttr,
    Static,
)
from hamlc.exceptions import ConfigurationError, TemplateSyntaxError


def parse(source, **options):
    return Parser(**options).call(source)


def test_tag_with_inline_text():
    tree = parse("%p Hello")

    assert tree == Multi(
        [HtmlTag("p", HtmlAttrs(), Multi([Interpolate("Hello"), Newline()]))]
    )


def test_shortcut_attributes_default_to_div():
    tree = parse(".box#main")
    tag = tree.children[0]

    assert tag.name == "div"
    assert tag.attrs.entries == [
        HtmlAttr("class", Static("box")),
        ShortAttr("id", Static("main")),
    ]


def test_html_attribute_list():
    tag = parse('%a(href="/x" title=t checked)').children[0]

    assert tag.attrs.entries == [
        HtmlAttr("href", Escape(True, Interpolate("/x"))),
        HtmlAttr("title", AttrValue(True, "t")),
        HtmlAttr("checked", AttrValue(True, "True")),
    ]


def test_host_attribute_list():
    tag = parse('%a{href: url, "data-x" => 1, :title => "hi"}').children[0]

    assert tag.attrs.entries == [
        HtmlAttr("href", AttrValue(True, "url")),
        HtmlAttr("data-x", AttrValue(True, "1")),
        HtmlAttr("title", Escape(True, Interpolate("hi"))),
    ]


def test_attribute_code_keeps_nested_brackets():
    tag = parse("%a{href: url_for('x', {'a': 1}), id: y}").children[0]

    assert tag.attrs.entries[0] == HtmlAttr(
        "href", AttrValue(True, "url_for('x', {'a': 1})")
    )
    assert tag.attrs.entries[1] == HtmlAttr("id", AttrValue(True, "y"))


def test_multiline_attribute_list():
    tree = parse("%a(href='x'\n   title='y') link")
    tag = tree.children[0]

    assert [attr.name for attr in tag.attrs.entries] == ["href", "title"]
    # One line marker for the continuation line, one for the tag line
    assert tree.children[1] == Newline()
    assert tag.body == Multi([Interpolate("link"), Newline()])


def test_unterminated_attribute_list():
    with pytest.raises(TemplateSyntaxError, match="Expected closing delimiter \\)"):
        parse("%a(href='x'")


def test_unterminated_quote():
    with pytest.raises(TemplateSyntaxError, match="Expected closing quote"):
        parse("%a(href='x)")


def test_self_closed_tag():
    tree = parse("%br/")

    assert tree == Multi([HtmlTag("br", HtmlAttrs(), None), Newline()])


def test_text_after_closed_tag():
    with pytest.raises(TemplateSyntaxError, match="Unexpected text after closed tag"):
        parse("%br/ text")


@pytest.mark.parametrize(
    "source, expected",
    [
        ("= x", Output(True, "x", Multi([Newline()]))),
        ("&= x", Escape(True, Output(True, "x", Multi([Newline()])))),
        ("!= x", Output(False, "x", Multi([Newline()]))),
        ("== x", Output(False, "x", Multi([Newline()]))),
    ],
)
def test_output_markers(source, expected):
    assert parse(source).children[0] == expected


def test_control_line_with_block():
    tree = parse("- if x\n  %p")

    assert tree == Multi(
        [
            Control(
                "if x",
                Multi(
                    [Newline(), HtmlTag("p", HtmlAttrs(), Multi([Newline()]))]
                ),
            )
        ]
    )


def test_broken_line_continues_after_comma():
    tree = parse("= foo(a,\n  b)")

    assert tree.children[0] == Output(True, "foo(a,\nb)", Multi([Newline()]))


def test_broken_line_at_end_of_file():
    with pytest.raises(TemplateSyntaxError, match="Unexpected end of file"):
        parse("= foo(a,")


def test_embedded_text_block():
    tree = parse(":plain\n  one\n    two\n%p")

    assert tree.children[0] == Embedded(
        "plain",
        Multi([Newline(), Interpolate("one"), Newline(), Interpolate("\n  two")]),
    )


def test_text_not_indented_deep_enough():
    with pytest.raises(TemplateSyntaxError, match="Text line not indented deep enough"):
        parse(":plain\n    one\n  two")


def test_comment_and_silent_comment():
    tree = parse("/ note\n-# hidden\n  still hidden\n%p")

    assert tree.children[0] == HtmlComment(
        Multi([Static(" "), Multi([Interpolate("note")]), Static(" ")])
    )
    assert [type(node) for node in tree.children[1:]] == [
        Newline,
        Newline,
        Newline,
        HtmlTag,
    ]


def test_doctype_html5():
    assert parse("!!!").children[0] == HtmlDoctype("html")


def test_doctype_xml_prolog_in_xhtml():
    tree = parse("!!! XML", format="xhtml")

    assert tree.children[0] == Static("<?xml version='1.0' encoding='utf-8' ?>")


def test_doctype_html4_variant():
    assert parse("!!! Strict", format="html4").children[0] == HtmlDoctype("strict")
    assert parse("!!!", format="html4").children[0] == HtmlDoctype("transitional")


def test_escaped_line_indicator():
    tree = parse("\\= not code")

    assert tree.children[0] == Interpolate("= not code")


def test_unknown_line_indicator():
    with pytest.raises(TemplateSyntaxError, match="Unknown line indicator"):
        parse("% p")


def test_unexpected_indentation():
    with pytest.raises(TemplateSyntaxError, match="Unexpected indentation") as exc:
        parse("Hello\n  %p")

    assert exc.value.lineno == 2


def test_malformed_indentation_reports_line():
    with pytest.raises(TemplateSyntaxError, match="Malformed indentation") as exc:
        parse("%div\n  %p\n %span")

    assert exc.value.lineno == 3
    assert str(exc.value) == (
        "Malformed indentation\n"
        "  (__TEMPLATE__), Line 3, Column 1\n"
        "    %span\n"
        "    ^\n"
    )


def test_error_uses_file_label():
    with pytest.raises(TemplateSyntaxError) as exc:
        parse("% p", file="views/page.haml")

    assert "views/page.haml, Line 1" in str(exc.value)


def test_tabs_expand_to_tab_size():
    source = "%div\n\t%p\n        %b"

    siblings = parse(source, tab_size=8).children[0].body.children
    assert [node.name for node in siblings if isinstance(node, HtmlTag)] == ["p", "b"]

    p = parse(source, tab_size=4).children[0].body.children[1]
    assert p.body.children[1].name == "b"


def test_bytes_source_with_bom():
    tree = parse("\ufeff%p Hi".encode("utf-8"))

    assert tree.children[0].name == "p"


def test_bytes_source_in_configured_encoding():
    tree = parse("%p é".encode("latin-1"), encoding="latin-1")

    assert tree.children[0].body.children[0] == Interpolate("é")


def test_bytes_source_invalid_for_encoding():
    with pytest.raises(ConfigurationError, match="not valid ascii"):
        parse("%p é".encode("utf-8"), encoding="ascii")
    with pytest.raises(ConfigurationError, match="not valid utf-8"):
        parse(b"%p \xff\xfe")


def test_unknown_encoding():
    with pytest.raises(ConfigurationError, match="Unknown encoding nope"):
        parse(b"%p", encoding="nope")


def test_unterminated_interpolation_reports_position():
    with pytest.raises(TemplateSyntaxError) as exc:
        parse("%div\n  %p a #{x", file="page.haml")

    assert str(exc.value) == (
        "Text interpolation: Expected closing }\n"
        "  page.haml, Line 2, Column 7\n"
        "    %p a #{x\n"
        "         ^\n"
    )


def test_unterminated_interpolation_in_text_line():
    with pytest.raises(TemplateSyntaxError, match="Expected closing }") as exc:
        parse("Hi #{name")

    assert (exc.value.lineno, exc.value.column) == (1, 3)


def test_escaped_and_nested_interpolation_parse():
    assert parse("Hi \\#{x")
    assert parse("%p #{ {'a': 1}['a'] }")


def test_embedded_body_is_not_scanned_for_interpolation():
    tree = parse(":python\n  d = '#{'")

    assert tree.children[0] == Embedded(
        "python", Multi([Newline(), Interpolate("d = '#{'")])
    )


@pytest.mark.parametrize("source", ["%br foo", "%img= src", "%input(type='text') x"])
def test_void_element_rejects_content(source):
    with pytest.raises(TemplateSyntaxError, match="Unexpected text after closed tag"):
        parse(source)


def test_void_element_content_error_column():
    with pytest.raises(TemplateSyntaxError) as exc:
        parse("%br foo")

    assert exc.value.column == 4


@pytest.mark.parametrize("source", ["=", "!= ", "%p="])
def test_output_requires_code(source):
    with pytest.raises(TemplateSyntaxError, match="Expected code after output marker"):
        parse(source)
