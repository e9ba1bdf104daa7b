"""Typer CLI for stock nesting."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from nesting.application import NestCommand, NestingOutput
from nesting.application.config import ConfigError, config_to_job, load_config
from nesting.cli.commands import display_load_error, validate_command
from nesting.domain import NestingError
from nesting.infrastructure import (
    FeasibilityFormatter,
    JsonResultExporter,
    SummaryFormatter,
)

EXIT_INVALID = 1
EXIT_INFEASIBLE = 2

app = typer.Typer(
    name="nest",
    help="Find the cheapest combination of stock sheets or lengths for a cut list.",
)

# Register validate command
app.command(name="validate")(validate_command)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log search progress to stderr"),
    ] = False,
) -> None:
    """Stock nesting optimizer."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_job(job_file: Path, max_steps: int | None = None, time_limit: float | None = None):
    try:
        config = load_config(job_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=EXIT_INVALID)
    return config_to_job(config, max_steps=max_steps, time_limit=time_limit)


def _emit(text: str, output_file: Path | None) -> None:
    if output_file is None:
        typer.echo(text)
        return
    output_file.write_text(text + "\n", encoding="utf-8")
    typer.echo(f"Wrote {output_file}")


def _report_failure(result: NestingOutput) -> None:
    for error in result.errors:
        typer.echo(f"Error: {error}", err=True)
    if result.feasibility is not None and not result.feasibility.is_feasible:
        typer.echo(FeasibilityFormatter().format(result.feasibility), err=True)


@app.command()
def run(
    job_file: Annotated[Path, typer.Argument(help="Path to the JSON job file")],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json"),
    ] = "text",
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the result to this file"),
    ] = None,
    max_steps: Annotated[
        int | None,
        typer.Option("--max-steps", min=1, help="Stop exhaustive search after N nodes"),
    ] = None,
    time_limit: Annotated[
        float | None,
        typer.Option("--time-limit", min=0.001, help="Stop exhaustive search after S seconds"),
    ] = None,
    hide_layouts: Annotated[
        bool,
        typer.Option("--no-layouts", help="Omit per-layout placements from text output"),
    ] = False,
) -> None:
    """Nest the demand of a job file onto its stock catalog."""
    if output_format not in ("text", "json"):
        typer.echo(f"Unknown format: {output_format}. Available: text, json", err=True)
        raise typer.Exit(code=EXIT_INVALID)

    job = _load_job(job_file, max_steps=max_steps, time_limit=time_limit)

    try:
        result = NestCommand().execute(job)
    except NestingError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_INVALID)

    if output_format == "json":
        _emit(JsonResultExporter().export(result), output_file)
    elif result.summary is not None:
        text = SummaryFormatter(include_layouts=not hide_layouts).format(result.summary)
        if result.budget_exhausted:
            text += "\n\nNote: search budget exhausted; result may not be optimal."
        _emit(text, output_file)

    if not result.is_valid:
        _report_failure(result)
        raise typer.Exit(code=EXIT_INFEASIBLE)


@app.command()
def check(
    job_file: Annotated[Path, typer.Argument(help="Path to the JSON job file")],
) -> None:
    """Report which demand pieces fit no stock unit, without searching."""
    job = _load_job(job_file)

    try:
        result = NestCommand().check(job)
    except NestingError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_INVALID)

    typer.echo(FeasibilityFormatter().format(result.feasibility))
    if result.failure is not None:
        raise typer.Exit(code=EXIT_INFEASIBLE)


if __name__ == "__main__":
    app()
