"""Tests for the hamlc command line."""

import json

from typer.testing import CliRunner

from hamlc import __version__
from hamlc.main import typer_app

runner = CliRunner()


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_render_to_stdout(tmp_path):
    template = write(tmp_path, "page.haml", "%p Hi")

    result = runner.invoke(typer_app, [str(template)])

    assert result.exit_code == 0
    assert result.output == "<p>Hi</p>\n"


def test_render_with_locals_and_options(tmp_path):
    template = write(tmp_path, "page.haml", "%div\n  %p= name")
    locals_file = write(tmp_path, "locals.yaml", "name: '<Ann>'\n")

    result = runner.invoke(
        typer_app, [str(template), "-l", str(locals_file), "--escape-html", "--pretty"]
    )

    assert result.exit_code == 0
    assert result.output == "<div>\n  <p>&lt;Ann&gt;</p>\n</div>\n"


def test_config_file(tmp_path):
    template = write(tmp_path, "page.haml", "%br")
    config = write(tmp_path, "hamlc.yaml", "format: xhtml\n")

    result = runner.invoke(typer_app, [str(template), "-c", str(config)])

    assert result.exit_code == 0
    assert result.output == "<br />\n"


def test_format_option_overrides_config(tmp_path):
    template = write(tmp_path, "page.haml", "%br")
    config = write(tmp_path, "hamlc.yaml", "format: xhtml\n")

    result = runner.invoke(
        typer_app, [str(template), "-c", str(config), "--format", "html5"]
    )

    assert result.output == "<br>\n"


def test_source_output(tmp_path):
    template = write(tmp_path, "page.haml", "%p= x")

    result = runner.invoke(typer_app, [str(template), "--source"])

    assert result.exit_code == 0
    assert f"# Generated by hamlc from {template}" in result.output
    assert "_hamlc_str(x)" in result.output


def test_ir_output(tmp_path):
    template = write(tmp_path, "page.haml", "%p Hi")

    result = runner.invoke(typer_app, [str(template), "--ir"])

    assert result.exit_code == 0
    tree = json.loads(result.output)
    assert tree["type"] == "Multi"
    assert tree["children"][0] == {"type": "Static", "text": "<p>Hi</p>"}


def test_output_file(tmp_path):
    template = write(tmp_path, "page.haml", "%p Hi")
    out = tmp_path / "out" / "page.html"

    result = runner.invoke(typer_app, [str(template), "-o", str(out)])

    assert result.exit_code == 0
    assert out.read_text() == "<p>Hi</p>"


def test_syntax_error_exits_with_1(tmp_path):
    template = write(tmp_path, "page.haml", "%div\n  %p\n %b")

    result = runner.invoke(typer_app, [str(template)])

    assert result.exit_code == 1
    assert "Malformed indentation" in result.output


def test_missing_template(tmp_path):
    result = runner.invoke(typer_app, [str(tmp_path / "nope.haml")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_invalid_config(tmp_path):
    template = write(tmp_path, "page.haml", "%p")
    config = write(tmp_path, "hamlc.yaml", "colour: red\n")

    result = runner.invoke(typer_app, [str(template), "-c", str(config)])

    assert result.exit_code == 1
    assert "Invalid options" in result.output


def test_version(tmp_path):
    result = runner.invoke(typer_app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
