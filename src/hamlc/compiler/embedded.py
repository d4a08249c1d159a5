"""Embedded engines - ``:markdown``, ``:javascript``, ``:plain`` and friends.

An ``Embedded`` node names an engine and carries the raw text block
below it. ``EmbeddedEngines`` looks the name up in an ``EngineRegistry``
and hands the block to the engine, which returns ordinary IR.

Engines work at one of two times:

- compile time: the text is rendered once while compiling (markdown).
- render time: the text is emitted as host code and rendered on every
  call (jinja).
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import markdown

from hamlc.ast.node import (
    Code,
    Dynamic,
    Escape,
    HtmlAttr,
    HtmlAttrs,
    HtmlTag,
    Interpolate,
    Multi,
    Newline,
    Node,
    Output,
    Static,
)
from hamlc.compiler.filter import Filter
from hamlc.compiler.interpolation import Interpolation
from hamlc.config import Options
from hamlc.exceptions import EmbeddedEngineError, FilterError

log = logging.getLogger(__name__)

EngineFactory = Callable[[Options], "EmbeddedEngine"]


class TextCollector(Filter):
    """Concatenates the text of every ``Interpolate`` node in a block."""

    def call(self, node: Node) -> str:  # type: ignore[override]
        self._parts: list[str] = []
        self.compile(node)
        return "".join(self._parts)

    def on_interpolate(self, text: str) -> Node:
        self._parts.append(text)
        return Interpolate(text)


class NewlineCollector(Filter):
    """Keeps only the line markers of a block."""

    def call(self, node: Node) -> Multi:  # type: ignore[override]
        self._newlines = Multi()
        self.compile(node)
        return self._newlines

    def on_newline(self) -> Node:
        self._newlines.append(Newline())
        return Newline()


class OutputProtector(Filter):
    """Replaces interpolated output with placeholders while text is rendered.

    Statics are collected as text and every ``Output`` node is swapped for
    a ``pro<n>tect`` marker; ``unprotect`` splits rendered text back into
    ``Static`` and the protected ``Output`` nodes.
    """

    def call(self, node: Node) -> str:  # type: ignore[override]
        self._protect: list[Node] = []
        self._parts: list[str] = []
        self.compile(node)
        return "".join(self._parts)

    def on_static(self, text: str) -> Node:
        self._parts.append(text)
        return Static(text)

    def on_output(self, escape: bool, code: str, body: Node) -> Node:
        node = Output(escape, code, body)
        self._parts.append(f"pro{len(self._protect)}tect")
        self._protect.append(node)
        return node

    def unprotect(self, text: str) -> Multi:
        block = Multi()
        for i, node in enumerate(self._protect):
            marker = f"pro{i}tect"
            head, found, text = text.partition(marker)
            if not found:
                raise FilterError(f"Embedded engine lost interpolated output {marker}")
            if head:
                block.append(Static(head))
            block.append(node)
        if text:
            block.append(Static(text))
        return block


class EmbeddedEngine(Filter):
    """Base class of the engines; ``on_embedded`` returns the rendered IR."""

    def __init__(self, options: Options | None = None, **settings: Any):
        super().__init__(options)
        self.settings = settings

    def collect_text(self, body: Node) -> str:
        return TextCollector(self.options).call(body)

    def collect_newlines(self, body: Node) -> Multi:
        return NewlineCollector(self.options).call(body)

    def on_embedded(self, name: str, body: Node) -> Node:
        raise NotImplementedError


class MarkdownEngine(EmbeddedEngine):
    """Renders markdown while compiling; ``#{...}`` stays dynamic."""

    def on_embedded(self, name: str, body: Node) -> Node:
        protector = OutputProtector(self.options)
        text = protector.call(Interpolation(self.options).call(body))
        html = markdown.markdown(text, **self.settings)
        return Multi([protector.unprotect(html), self.collect_newlines(body)])


class JinjaEngine(EmbeddedEngine):
    """Emits the block as a jinja template rendered on every call.

    The template sees the render namespace, so context values and locals
    are available to it.
    """

    def on_embedded(self, name: str, body: Node) -> Node:
        source = self.collect_text(body)
        code = f"_hamlc_render_jinja({source!r}, globals())"
        return Multi([Escape(False, Dynamic(code)), self.collect_newlines(body)])


class PythonEngine(EmbeddedEngine):
    """Runs the block as host statements."""

    def on_embedded(self, name: str, body: Node) -> Node:
        return Multi([Code(self.collect_text(body)), self.collect_newlines(body)])


class PlainEngine(EmbeddedEngine):
    """Outputs the text block with interpolation.

    ``escape`` selects whether the text and interpolated values are escaped.
    """

    def on_embedded(self, name: str, body: Node) -> Node:
        escape = self.settings.get("escape", False)
        text = self.collect_text(body)
        return Multi([Escape(escape, Interpolate(text)), self.collect_newlines(body)])


class PreserveEngine(EmbeddedEngine):
    """Escapes the text and encodes its line breaks as ``&#x000A;``."""

    def on_embedded(self, name: str, body: Node) -> Node:
        block = Multi()
        for i, line in enumerate(self.collect_text(body).split("\n")):
            if i:
                block.append(Static("&#x000A;"))
            block.append(Escape(True, Interpolate(line)))
        block.append(self.collect_newlines(body))
        return block


class CDATAEngine(EmbeddedEngine):
    def on_embedded(self, name: str, body: Node) -> Node:
        text = self.collect_text(body)
        return Multi(
            [
                Static("<![CDATA[\n"),
                Static(text),
                Static("\n]]>"),
                self.collect_newlines(body),
            ]
        )


class TagEngine(EmbeddedEngine):
    """Wraps the block in an element, e.g. ``<style>``.

    Settings: ``tag``, ``attributes`` (a name to value mapping) and an
    optional ``engine`` class that renders the content first.
    """

    def on_embedded(self, name: str, body: Node) -> Node:
        engine_class = self.settings.get("engine")
        if engine_class is not None:
            content = engine_class(self.options).on_embedded(name, body)
        else:
            content = body
        attributes = self.settings.get("attributes") or {}
        attrs = HtmlAttrs([HtmlAttr(k, Static(v)) for k, v in attributes.items()])
        return HtmlTag(self.settings["tag"], attrs, self.wrap(content))

    def wrap(self, content: Node) -> Node:
        return content


class JavascriptEngine(TagEngine):
    """``<script>`` block; the content is CDATA-wrapped for xhtml."""

    def wrap(self, content: Node) -> Node:
        if self.options.format != "xhtml":
            return content
        return Multi([Static("\n//<![CDATA[\n"), content, Static("\n//]]>\n")])


class EngineRegistry:
    """Maps engine names to engine factories.

    ``register`` stores a class plus fixed settings; every ``Engine``
    owns its registry, so registering on one never affects another.
    """

    def __init__(self) -> None:
        self._factories: dict[str, EngineFactory] = {}

    def register(
        self, name: str, engine_class: type[EmbeddedEngine], **settings: Any
    ) -> None:
        def factory(options: Options) -> EmbeddedEngine:
            return engine_class(options, **settings)

        self._factories[name] = factory

    def create(self, name: str, options: Options) -> EmbeddedEngine:
        factory = self._factories.get(name)
        if factory is None:
            raise EmbeddedEngineError(f"Embedded engine {name} not found")
        return factory(options)

    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def copy(self) -> "EngineRegistry":
        registry = EngineRegistry()
        registry._factories = dict(self._factories)
        return registry

    @classmethod
    def default(cls) -> "EngineRegistry":
        """A registry with the built-in engines."""
        registry = cls()
        registry.register("markdown", MarkdownEngine)
        registry.register("jinja", JinjaEngine)
        registry.register(
            "javascript",
            JavascriptEngine,
            tag="script",
            attributes={"type": "text/javascript"},
        )
        registry.register(
            "css", TagEngine, tag="style", attributes={"type": "text/css"}
        )
        registry.register("python", PythonEngine)
        registry.register("plain", PlainEngine, escape=False)
        registry.register("escaped", PlainEngine, escape=True)
        registry.register("preserve", PreserveEngine)
        registry.register("cdata", CDATAEngine)
        return registry


class EmbeddedEngines(Filter):
    """Dispatches ``Embedded`` nodes to the engines of a registry.

    ``enable_engines`` (a whitelist) and ``disable_engines`` (a blacklist)
    restrict the usable names. Engine instances are created on first use
    and reused for the rest of the compiler's life.
    """

    def __init__(
        self,
        options: Options | None = None,
        registry: EngineRegistry | None = None,
        **kwargs: Any,
    ):
        super().__init__(options, **kwargs)
        self.registry = registry if registry is not None else EngineRegistry.default()
        self._engines: dict[str, EmbeddedEngine] = {}

    def enabled(self, name: str) -> bool:
        enable = self.options.enable_engines
        disable = self.options.disable_engines
        if enable is not None and name not in enable:
            return False
        return disable is None or name not in disable

    def on_embedded(self, name: str, body: Node) -> Node:
        if not self.enabled(name):
            raise EmbeddedEngineError(f"Embedded engine {name} is disabled")

        engine = self._engines.get(name)
        if engine is None:
            engine = self.registry.create(name, self.options)
            self._engines[name] = engine
            log.debug("created embedded engine %s", name)
        return engine.on_embedded(name, body)
