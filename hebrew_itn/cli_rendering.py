"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics
and normalization report summaries.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import NormalizerStageError
from .models.datatypes import NormalizationReport


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, NormalizerStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_report_summary(report: NormalizationReport) -> None:
    """Print replacement and unresolved-expression counts to stderr."""

    typer.echo(f"Replacements: {len(report.replacements)}", err=True)
    typer.echo(f"Unresolved: {len(report.unresolved)}", err=True)
    for unresolved in report.unresolved:
        typer.echo(
            f"  [{unresolved.start_offset}:{unresolved.end_offset}] {unresolved.raw_text}",
            err=True,
        )
