"""hamlc CLI Main Entry Point

Usage:
    hamlc page.haml                     # Render to stdout
    hamlc page.haml -l locals.yaml      # Render with template locals
    hamlc page.haml --source            # Print the generated Python
    hamlc page.haml --ir                # Print the compiled IR as JSON
    hamlc page.haml -c hamlc.yaml       # Load options from a YAML file
    hamlc page.haml -o page.html        # Write to a file
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ._version import __version__
from .commands import compile_command
from .commands.utils import setup_logging


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hamlc {__version__}")
        raise typer.Exit()


typer_app = typer.Typer()


@typer_app.command()
def cli(
    template: Path = typer.Argument(..., help="Template file to compile."),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="YAML file with compiler options."
    ),
    fmt: Optional[str] = typer.Option(
        None, "--format", help="Output format: html5, html4 or xhtml."
    ),
    escape_html: Optional[bool] = typer.Option(
        None, "--escape-html/--no-escape-html", help="Escape dynamic output."
    ),
    pretty: Optional[bool] = typer.Option(
        None, "--pretty/--no-pretty", help="Indent the generated html."
    ),
    source: bool = typer.Option(
        False, "--source", help="Print the generated Python instead of rendering."
    ),
    ir: bool = typer.Option(
        False, "--ir", help="Print the compiled IR as JSON instead of rendering."
    ),
    locals_path: Optional[Path] = typer.Option(
        None, "-l", "--locals", help="YAML file with template locals."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the result to a file."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Compile an indentation-based html template.

    Renders the template to html, or prints the generated Python source.
    """
    setup_logging(verbose)
    compile_command(
        template,
        config=config,
        locals_path=locals_path,
        output=output,
        source=source,
        ir=ir,
        format=fmt,
        escape_html=escape_html,
        pretty=pretty,
    )


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
