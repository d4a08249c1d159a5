"""Tests for control structure lowering."""

from hamlc.ast import (
    Block,
    Capture,
    Code,
    Control,
    Dynamic,
    Escape,
    Multi,
    Output,
    Static,
)
from hamlc.compiler import ControlStructures
from hamlc.compiler.controls import opens_block


def test_compound_statement_opens_block():
    node = Control("if x", Multi([Static("a")]))

    assert ControlStructures().call(node) == Multi(
        [Code("if x:"), Block(Multi([Static("a")]))]
    )


def test_existing_colon_is_kept():
    node = Control("for i in items:", Multi())

    assert ControlStructures().call(node) == Multi([Code("for i in items:"), Block(Multi())])


def test_simple_statement():
    node = Control("x = 1", Multi())

    assert ControlStructures().call(node) == Multi([Code("x = 1"), Multi()])


def test_opens_block():
    assert opens_block("else")
    assert opens_block("with open(p) as f")
    assert opens_block("items.sort(key=f) if False else None:")
    assert not opens_block("total = 0")
    assert not opens_block("iffy = 1")


def test_unescaped_output():
    node = Output(False, "x", Multi())

    assert ControlStructures().call(node) == Multi([Escape(False, Dynamic("x")), Multi()])


def test_output_block_is_captured():
    node = Output(True, "wrap(block)", Multi([Static("hi")]))

    assert ControlStructures().call(node) == Multi(
        [
            Capture("_hamlc_controlstructures1", Multi([Static("hi")])),
            Code("block = _hamlc_controlstructures1"),
            Dynamic("wrap(block)"),
        ]
    )


def test_disable_capture_renders_block_inline():
    node = Output(True, "x", Multi([Static("hi")]))

    result = ControlStructures(disable_capture=True).call(node)
    assert result == Multi([Dynamic("x"), Multi([Static("hi")])])
