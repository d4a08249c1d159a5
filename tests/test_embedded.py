"""Tests for the embedded engines and their registry."""

import pytest

from hamlc import Engine, render
from hamlc.ast import Static
from hamlc.compiler import EmbeddedEngine, EngineRegistry
from hamlc.exceptions import ConfigurationError, EmbeddedEngineError, FilterError


class ShoutEngine(EmbeddedEngine):
    def on_embedded(self, name, body):
        return Static(self.collect_text(body).upper())


def test_markdown_renders_while_compiling():
    engine = Engine()
    source = engine.call(":markdown\n  # Title")

    assert "<h1>Title</h1>" in source
    assert engine.compile(":markdown\n  # Title").render() == "<h1>Title</h1>"


def test_markdown_keeps_interpolation_dynamic():
    html = render(":markdown\n  Hi *#{name}*", {"name": "<Bob>"}, escape_html=True)

    assert html == "<p>Hi <em>&lt;Bob&gt;</em></p>"


def test_jinja_renders_with_namespace():
    html = render(":jinja\n  {{ x + 1 }}-{{ y }}", {"x": 1}, {"y": "z"})

    assert html == "2-z"


def test_javascript_and_css():
    assert render(":javascript\n  alert(1)") == (
        '<script type="text/javascript">alert(1)</script>'
    )
    assert render(":css\n  p { color: red }") == (
        '<style type="text/css">p { color: red }</style>'
    )


def test_javascript_cdata_in_xhtml():
    html = render(":javascript\n  alert(1)", format="xhtml")

    assert html == (
        '<script type="text/javascript">\n//<![CDATA[\nalert(1)\n//]]>\n</script>'
    )


def test_python_block():
    assert render(":python\n  x = 2\n  y = x * 3\n= y") == "6"


def test_plain_and_escaped():
    context = {"x": "<i>"}

    assert render(":plain\n  <b>#{x}</b>", context, escape_html=True) == "<b><i></b>"
    assert render(":escaped\n  <b>#{x}</b>", context) == "&lt;b&gt;&lt;i&gt;&lt;/b&gt;"


def test_preserve_encodes_newlines():
    assert render(":preserve\n  a<\n  b") == "a&lt;&#x000A;b"


def test_cdata():
    assert render(":cdata\n  x < y") == "<![CDATA[\nx < y\n]]>"


def test_unknown_engine():
    with pytest.raises(EmbeddedEngineError, match="Embedded engine nope not found") as exc:
        Engine().call(":nope\n  x")

    assert isinstance(exc.value, ConfigurationError)
    assert isinstance(exc.value, FilterError)


def test_disabled_engines():
    with pytest.raises(ConfigurationError, match="Embedded engine markdown is disabled"):
        Engine(disable_engines=["markdown"]).call(":markdown\n  x")

    engine = Engine(enable_engines=["plain"])
    assert engine.compile(":plain\n  x").render() == "x"
    with pytest.raises(FilterError, match="Embedded engine css is disabled"):
        engine.call(":css\n  x")


def test_engine_lists_must_hold_strings():
    with pytest.raises(ConfigurationError):
        Engine(disable_engines="markdown")
    with pytest.raises(ConfigurationError):
        Engine(enable_engines=[1])


def test_registry_is_per_engine():
    registry = EngineRegistry.default()
    registry.register("shout", ShoutEngine)

    assert Engine(registry=registry).compile(":shout\n  hey").render() == "HEY"
    with pytest.raises(FilterError, match="not found"):
        Engine().call(":shout\n  hey")


def test_registry_copy_is_independent():
    base = EngineRegistry.default()
    copy = base.copy()
    copy.register("shout", ShoutEngine)

    assert "shout" in copy
    assert "shout" not in base
    assert "markdown" in base.names()
