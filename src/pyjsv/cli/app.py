# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Command-line front end validating instance files against a schema file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .. import __version__
from ..api import compile_schema
from ..config import CompileOptions
from ..drafts import Draft
from ..errors import CompileError
from ..io import DocumentError, load_document, load_schema
from ..logging import configure_debug_logging, fail, line, ok
from ..tree import Validator
from ..uri import path_to_uri

app = typer.Typer(
    name="pyjsv",
    help="Validate JSON documents against a JSON Schema.",
    add_completion=False,
    no_args_is_help=True,
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"pyjsv {__version__}")
        raise typer.Exit(code=0)


def _check_instance(validator: Validator, path: Path, *, use_emoji: bool, use_color: bool) -> bool:
    """Validate the instance file at ``path`` and report the outcome.

    Returns:
        bool: ``True`` when the instance is valid.
    """

    try:
        instance = load_document(path)
    except (OSError, DocumentError) as exc:
        fail(f"{path} - ERROR. {exc}", use_emoji=use_emoji, use_color=use_color)
        return False
    errors = list(validator.iter_errors(instance))
    if not errors:
        ok(f"{path} - VALID", use_emoji=use_emoji, use_color=use_color)
        return True
    fail(f"{path} - INVALID. Errors:", use_emoji=use_emoji, use_color=use_color)
    for number, error in enumerate(errors, start=1):
        line(f"{number}. {error.message}", use_color=use_color)
    return False


@app.command()
def validate(
    schema: Annotated[Path, typer.Argument(help="Path to the JSON Schema file.", dir_okay=False)],
    instances: Annotated[
        list[Path] | None,
        typer.Option("--instance", "-i", help="Instance file to validate; repeatable.", dir_okay=False),
    ] = None,
    draft: Annotated[
        Draft | None,
        typer.Option("--draft", "-d", help="Force a draft instead of reading $schema."),
    ] = None,
    validate_schema: Annotated[
        bool,
        typer.Option("--validate-schema/--no-validate-schema", help="Check the schema against its meta-schema."),
    ] = True,
    use_emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Prefix results with emoji.")] = False,
    use_color: Annotated[bool, typer.Option("--color/--no-color", help="Colour the output on a terminal.")] = True,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log compilation details to stderr.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=_show_version, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Validate each ``--instance`` file against ``SCHEMA``.

    The schema file's location is its base URI, so relative references to
    neighbouring files resolve from disk.

    Raises:
        typer.Exit: With status 0 when everything is valid, otherwise 1.
    """

    configure_debug_logging(verbose)
    try:
        document = load_schema(schema)
        options = CompileOptions(draft=draft, base_uri=path_to_uri(schema), validate_schema=validate_schema)
        validator = compile_schema(document, options)
    except (OSError, DocumentError, CompileError) as exc:
        fail(f"Schema is invalid. Error: {exc}", use_emoji=use_emoji, use_color=use_color)
        raise typer.Exit(code=1) from exc

    if not instances:
        ok(f"{schema} - VALID SCHEMA", use_emoji=use_emoji, use_color=use_color)
        raise typer.Exit(code=0)

    results = [_check_instance(validator, path, use_emoji=use_emoji, use_color=use_color) for path in instances]
    raise typer.Exit(code=0 if all(results) else 1)


def main() -> None:
    """Run the ``pyjsv`` console script."""

    app()


__all__ = ["app", "main"]
