"""Compile (and render) a template file"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import typer

from hamlc.ast.node import dump_ir
from hamlc.compiler import Engine
from hamlc.config import Options, load_options
from hamlc.exceptions import HamlcError

from .utils import load_locals

log = logging.getLogger(__name__)


def compile_command(
    template: Path,
    config: Optional[Path] = None,
    locals_path: Optional[Path] = None,
    output: Optional[Path] = None,
    source: bool = False,
    ir: bool = False,
    **overrides: Any,
) -> None:
    """Compile ``template`` and write the html, the Python source or the IR."""
    if not template.exists():
        typer.secho(f"Error: File not found: {template}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    overrides = {k: v for k, v in overrides.items() if v is not None}
    overrides.setdefault("file", str(template))

    try:
        if config is not None:
            options = load_options(config, **overrides)
        else:
            options = Options.build(**overrides)
        log.info("compiling %s", template)

        engine = Engine(options)
        text = template.read_bytes()
        if ir:
            result = dump_ir(engine.transform(text)).decode()
        elif source:
            result = engine.call(text)
        else:
            variables = load_locals(locals_path) if locals_path is not None else {}
            result = engine.compile(text).render(locals=variables)
    except (HamlcError, FileNotFoundError) as exc:
        typer.secho(f"Error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result, encoding="utf-8")
        log.info("wrote %s", output)
    else:
        typer.echo(result)
