"""Compiler options.

Options can be passed as keyword arguments (snake_case or the camelCase
names used in option files) or loaded from a YAML file:

    format: xhtml
    escapeHtml: true
    mergeAttrs:
      class: " "
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from hamlc.exceptions import ConfigurationError


class Options(BaseModel):
    """Options recognized by the parser, the passes and the generator."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "forbid",
        "frozen": True,
    }

    # Parser
    file: str | None = Field(
        default=None, alias="sourceFile", description="Label used in error messages"
    )
    format: Literal["html5", "html4", "xhtml"] = "html5"
    escape_html: bool = False
    tab_size: int = Field(default=4, ge=0)
    encoding: str = "utf-8"

    # HTML output
    pretty: bool = Field(default=False, alias="prettyPrint")
    indent: int = Field(default=2, ge=0, alias="indentWidth")
    attr_quote: str = Field(default='"', alias="attrQuoteChar")

    # Attribute passes
    sort_attrs: bool = True
    sort_attr_keys: list[str] = Field(default_factory=lambda: ["class"])
    override_attrs: list[str] = Field(default_factory=lambda: ["id"])
    merge_attrs: dict[str, str] = Field(
        default_factory=lambda: {"id": "_", "class": " "}
    )

    # Embedded engines
    enable_engines: list[str] | None = None
    disable_engines: list[str] | None = None

    # Control structures / generator
    disable_capture: bool = False
    streaming: bool = False
    generator: Literal["array", "string"] = "array"

    @field_validator("attr_quote")
    @classmethod
    def check_attr_quote(cls, value: str) -> str:
        if value not in ('"', "'"):
            raise ValueError("attr_quote must be a single or double quote")
        return value

    @classmethod
    def build(cls, **options: Any) -> "Options":
        """Validate keyword options, raising ConfigurationError on failure."""
        try:
            return cls.model_validate(options)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid options: {exc}") from exc

    def merged(self, **overrides: Any) -> "Options":
        """Return a copy with ``overrides`` applied and re-validated."""
        data = self.model_dump()
        data.update(overrides)
        return Options.build(**data)


def load_options(path: Path, **overrides: Any) -> Options:
    """Load options from a YAML file; keyword overrides win."""
    if not path.exists():
        raise FileNotFoundError(f"Options file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"Options file must contain a mapping: {path}")

    options = Options.build(**data)
    return options.merged(**overrides) if overrides else options
