"""Engine - the parser, the passes and the generator wired together."""

from __future__ import annotations

import logging
from typing import Any

from hamlc.ast.node import Node
from hamlc.ast.parser import Parser
from hamlc.compiler.attributes import (
    AttributeOverrider,
    AttributeValueSorter,
    CodeAttributes,
)
from hamlc.compiler.controls import ControlStructures
from hamlc.compiler.embedded import EmbeddedEngines, EngineRegistry
from hamlc.compiler.escaping import Escapable
from hamlc.compiler.filter import Filter
from hamlc.compiler.generator import Generator
from hamlc.compiler.html import Html
from hamlc.compiler.interpolation import Interpolation
from hamlc.compiler.optimizer import MultiFlattener, StaticMerger
from hamlc.compiler.spec import CompiledTemplate, GeneratedProgram
from hamlc.config import Options

log = logging.getLogger(__name__)


class Engine:
    """Compiles template source to Python.

    Example:
        engine = Engine(escape_html=True)
        template = engine.compile("%p= greeting")
        template.render({"greeting": "<hi>"})  # '<p>&lt;hi&gt;</p>'

    Each engine owns its options and its ``EngineRegistry``; registering an
    embedded engine on one never affects another.
    """

    def __init__(
        self,
        options: Options | None = None,
        registry: EngineRegistry | None = None,
        **kwargs: Any,
    ):
        if options is None:
            options = Options.build(**kwargs)
        elif kwargs:
            options = options.merged(**kwargs)
        self.options = options
        self.registry = registry if registry is not None else EngineRegistry.default()
        self.parser = Parser(options)
        self.filters = self._build_filters()
        self.generator = Generator(options)

    def _build_filters(self) -> list[Filter]:
        o = self.options
        filters: list[Filter] = [
            EmbeddedEngines(o, registry=self.registry),
            Interpolation(o),
            ControlStructures(o),
            AttributeOverrider(o),
        ]
        if o.sort_attrs:
            filters.append(AttributeValueSorter(o))
        filters += [CodeAttributes(o), Html(o), Escapable(o), MultiFlattener(o)]
        if not o.streaming:
            filters.append(StaticMerger(o))
        return filters

    def transform(self, source: str | bytes) -> Node:
        """Parse ``source`` and run every pass; returns the final IR."""
        tree: Node = self.parser.call(source)
        for f in self.filters:
            log.debug("running %s", type(f).__name__)
            tree = f.call(tree)
        return tree

    def generate(self, source: str | bytes) -> GeneratedProgram:
        return self.generator.call(self.transform(source))

    def call(self, source: str | bytes) -> str:
        """Compile ``source`` to Python source text."""
        return self.generate(source).source

    __call__ = call

    def compile(self, source: str | bytes) -> CompiledTemplate:
        """Compile ``source`` to a renderable template."""
        program = self.generate(source)
        filename = self.options.file or "(__TEMPLATE__)"
        log.debug("compiling %s", filename)
        return CompiledTemplate(program, filename)
