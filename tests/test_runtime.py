"""Tests for the render-time helpers."""

from markupsafe import Markup

from hamlc import runtime


def test_escape_html():
    assert runtime.escape_html("<a href='x'>") == "&lt;a href=&#39;x&#39;&gt;"
    assert runtime.escape_html(None) == ""
    assert runtime.escape_html(Markup("<b>")) == "<b>"
    assert runtime.escape_html(3) == "3"


def test_to_str():
    assert runtime.to_str(None) == ""
    assert runtime.to_str(1.5) == "1.5"
    assert type(runtime.to_str(Markup("x"))) is str


def test_join_attr():
    assert runtime.join_attr(" ", ["a", None, False, "", ["b", ("c",)]]) == "a b c"
    assert runtime.join_attr("_", ["<x>", Markup("<y>")]) == "&lt;x&gt;_<y>"
    assert runtime.join_attr(" ", [None]) == ""


def test_render_jinja_skips_helper_names():
    namespace = runtime.namespace()
    namespace["x"] = "<b>"

    assert runtime.render_jinja("{{ x }}{{ _hamlc_str is defined }}", namespace) == (
        "<b>False"
    )


def test_namespace_is_fresh():
    first = runtime.namespace()
    first["x"] = 1

    assert "x" not in runtime.namespace()
