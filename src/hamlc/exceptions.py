"""hamlc Exceptions

Custom exceptions raised while compiling templates.
"""

from __future__ import annotations


class HamlcError(Exception):
    """Base exception for all hamlc errors."""

    pass


class TemplateSyntaxError(HamlcError):
    """Raised by the parser on malformed template source."""

    def __init__(
        self,
        error: str,
        file: str | None,
        line: str | None,
        lineno: int,
        column: int,
    ):
        self.error = error
        self.file = file or "(__TEMPLATE__)"
        self.line = line or ""
        self.lineno = lineno
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        line = self.line.lstrip()
        column = self.column + len(line) - len(self.line)
        return (
            f"{self.error}\n"
            f"  {self.file}, Line {self.lineno}, Column {self.column}\n"
            f"    {line}\n"
            f"    {' ' * column}^\n"
        )


class FilterError(HamlcError):
    """Raised when a compiler pass cannot transform its input."""

    pass


class InvalidExpressionError(FilterError):
    """Raised when a pass meets a node it does not accept."""

    pass


class ConfigurationError(HamlcError, ValueError):
    """Raised on invalid compiler options."""

    pass


class EmbeddedEngineError(ConfigurationError, FilterError):
    """Raised for an embedded engine name that is unknown or disabled."""

    pass
