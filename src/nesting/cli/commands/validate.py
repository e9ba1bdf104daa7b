"""Validate command for checking nesting job files.

This module provides the `validate` command that checks a JSON job file for
syntax and schema errors without running the search.
"""

from pathlib import Path
from typing import Annotated

import typer

from nesting.application.config import ConfigError, load_config


def validate_command(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file to validate"),
    ],
) -> None:
    """Validate a nesting job file.

    Exit codes:
        0 - Job file is valid
        1 - Job file has errors

    Example:
        nest validate my-job.json
    """
    typer.echo(f"Validating {job_file}...")
    typer.echo()

    try:
        config = load_config(job_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    pieces = sum(demand.quantity for demand in config.demand)
    typer.echo(
        f"{len(config.stock)} stock units, {len(config.demand)} demand templates "
        f"({pieces} pieces), mode: {config.mode.value}"
    )
    typer.echo("Validation passed.")


def display_load_error(error: ConfigError) -> None:
    """Display a job loading error on stderr."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path") or "(root)"
            message = detail.get("message", "Unknown error")
            typer.echo(f"  {path}: {message}", err=True)
            value = detail.get("value")
            if value is not None and not isinstance(value, (dict, list)):
                typer.echo(f"    Value: {value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)
