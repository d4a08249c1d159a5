"""Compiler passes, the Python generator and the engine pipeline."""

from hamlc.compiler.attributes import (
    AttributeOverrider,
    AttributeValueSorter,
    CodeAttributes,
)
from hamlc.compiler.controls import ControlStructures
from hamlc.compiler.embedded import (
    EmbeddedEngine,
    EmbeddedEngines,
    EngineRegistry,
    TagEngine,
)
from hamlc.compiler.engine import Engine
from hamlc.compiler.escaping import Escapable
from hamlc.compiler.filter import Filter
from hamlc.compiler.generator import Generator
from hamlc.compiler.html import Html
from hamlc.compiler.interpolation import Interpolation
from hamlc.compiler.optimizer import MultiFlattener, StaticMerger
from hamlc.compiler.spec import CompiledTemplate, GeneratedProgram

__all__ = [
    "AttributeOverrider",
    "AttributeValueSorter",
    "CodeAttributes",
    "CompiledTemplate",
    "ControlStructures",
    "EmbeddedEngine",
    "EmbeddedEngines",
    "Engine",
    "EngineRegistry",
    "Escapable",
    "Filter",
    "GeneratedProgram",
    "Generator",
    "Html",
    "Interpolation",
    "MultiFlattener",
    "StaticMerger",
    "TagEngine",
]
