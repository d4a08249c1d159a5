"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.logging import RichHandler

from hamlc.exceptions import ConfigurationError

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the hamlc CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level
    - Debug (HAMLC_DEBUG=1): DEBUG level - shows every compiler pass
    """
    debug = bool(os.environ.get("HAMLC_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("hamlc")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def load_locals(path: Path) -> dict[str, Any]:
    """Read template locals from a YAML mapping."""
    if not path.exists():
        raise FileNotFoundError(f"Locals file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"Locals file must contain a mapping: {path}")
    return data
