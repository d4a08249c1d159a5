"""Generator - writes the final IR tree out as Python source."""

from __future__ import annotations

import logging

from jinja2 import Environment

from hamlc.ast.node import (
    Block,
    Capture,
    Code,
    Dynamic,
    Multi,
    Newline,
    Node,
    Static,
)
from hamlc.compiler.spec import GeneratedProgram
from hamlc.config import Options
from hamlc.exceptions import InvalidExpressionError

log = logging.getLogger(__name__)

INDENT = "    "
BUFFER = "_hamlc_buf"
RESULT = "_hamlc_result"

PROGRAM_TEMPLATE = """\
# Generated by hamlc{{ " from " ~ file if file else "" }}

{{ buffer }} = {{ init }}
{% for line in lines %}
{{ line }}
{% endfor %}
{{ result }} = {{ finish }}
"""

# Lines the template emits before the first statement.
HEADER_LINES = 3

_env = Environment(keep_trailing_newline=True, trim_blocks=True, lstrip_blocks=True)
_program = _env.from_string(PROGRAM_TEMPLATE)


class Generator:
    """Emits Python statements for a tree of ``Multi``, ``Static``,
    ``Dynamic``, ``Code``, ``Block``, ``Capture`` and ``Newline`` nodes.

    The ``array`` strategy appends to a list and joins it at the end;
    the ``string`` strategy concatenates onto a str.
    """

    def __init__(self, options: Options | None = None, **kwargs):
        self.options = options if options is not None else Options.build(**kwargs)

    def call(self, node: Node) -> GeneratedProgram:
        self._lines: list[str] = []
        self._line_map: list[int] = []
        self._level = 0
        self._lineno = 1
        self._buffer = BUFFER

        self.generate(node)

        array = self.options.generator == "array"
        source = _program.render(
            file=self.options.file,
            buffer=BUFFER,
            init="[]" if array else "''",
            lines=self._lines,
            result=RESULT,
            finish=f"''.join({BUFFER})" if array else BUFFER,
        )
        line_map = [0] * HEADER_LINES + self._line_map + [0]
        log.debug("generated %d lines of python", len(self._lines))
        return GeneratedProgram(source, line_map, RESULT)

    __call__ = call

    def emit(self, statement: str) -> None:
        """Append ``statement`` at the current indentation."""
        for line in statement.split("\n"):
            self._lines.append(INDENT * self._level + line)
            self._line_map.append(self._lineno)
        self._lineno += statement.count("\n")

    def append(self, expression: str) -> None:
        if self.options.generator == "array":
            self.emit(f"{self._buffer}.append({expression})")
        else:
            self.emit(f"{self._buffer} += {expression}")

    def generate(self, node: Node) -> None:
        match node:
            case Multi(children):
                for child in children:
                    self.generate(child)
            case Static(text):
                if text:
                    self.append(repr(text))
            case Dynamic(code):
                self.append(f"_hamlc_str({code})")
            case Code(code):
                self.emit(code)
            case Newline():
                self._lineno += 1
            case Block(body):
                self._generate_block(body)
            case Capture(name, body):
                self._generate_capture(name, body)
            case _:
                raise InvalidExpressionError(f"Generator supports only core expressions, got {node!r}")

    def _generate_block(self, body: Node) -> None:
        self._level += 1
        start = len(self._lines)
        self.generate(body)
        if len(self._lines) == start:
            self.emit("pass")
        self._level -= 1

    def _generate_capture(self, name: str, body: Node) -> None:
        array = self.options.generator == "array"
        self.emit(f"{name} = {'[]' if array else repr('')}")

        saved, self._buffer = self._buffer, name
        self.generate(body)
        self._buffer = saved

        joined = f"''.join({name})" if array else name
        self.emit(f"{name} = _hamlc_markup({joined})")
