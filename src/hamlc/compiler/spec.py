"""Compiled template - generated host source plus its code object."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import CodeType
from typing import Any

from hamlc.runtime import namespace as runtime_namespace

log = logging.getLogger(__name__)


@dataclass
class GeneratedProgram:
    """Python source produced by the generator.

    ``line_map[i]`` is the template line that generated line ``i + 1``
    came from (0 for lines without a template origin).
    """

    source: str
    line_map: list[int] = field(default_factory=list)
    result: str = "_hamlc_result"

    def template_line(self, lineno: int) -> int:
        """Map a generated line number back to the template."""
        if 1 <= lineno <= len(self.line_map):
            return self.line_map[lineno - 1]
        return 0


@dataclass
class CompiledTemplate:
    """A template compiled to a Python code object.

    Rendering executes the code against a fresh namespace holding the
    runtime helpers, the context and the locals, so one template can be
    rendered concurrently.
    """

    program: GeneratedProgram
    filename: str = "(__TEMPLATE__)"
    code: CodeType = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.code = compile(self.program.source, self.filename, "exec")

    @property
    def source(self) -> str:
        return self.program.source

    @property
    def line_map(self) -> list[int]:
        return self.program.line_map

    def render(
        self,
        context: Any = None,
        locals: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> str:
        """Render with ``context`` (a mapping or an object bound to ``self``)."""
        namespace = runtime_namespace()
        if isinstance(context, Mapping):
            namespace.update(context)
        elif context is not None:
            namespace["self"] = context
        if locals:
            namespace.update(locals)
        namespace.update(kwargs)

        exec(self.code, namespace)
        return namespace[self.program.result]

    __call__ = render
