"""Command-line interface for hebrew-itn.

Responsibilities:
- Expose a single command that normalizes a text argument.
- Convert CLI options into `NormalizerConfig` and render failures consistently.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Annotated

import typer

from .cli_rendering import echo_report_summary, exit_with_command_error
from .config import ConfigLoader, NormalizerConfig
from .errors import NormalizerStageError
from .pipeline.engine import HebrewNormalizer
from .telemetry.logger import NormalizationLogger

app = typer.Typer(
    name="hebrew-itn",
    help="Convert spelled-out Hebrew numerals to digits.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def _load_yaml_config(config_path: Path) -> NormalizerConfig:
    """Load a YAML config file and map failures to stage errors."""

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise NormalizerStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise NormalizerStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except Exception as exc:
        raise NormalizerStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc


def _resolve_config(config_path: Path | None) -> NormalizerConfig:
    """Resolve config from `--config` or from `HEBREW_ITN_*` environment variables."""

    if config_path is not None:
        return _load_yaml_config(config_path)
    try:
        return ConfigLoader.from_env()
    except ValueError as exc:
        raise NormalizerStageError(
            stage="config",
            detail=str(exc),
            hint="Fix or unset the `HEBREW_ITN_*` environment variable and rerun.",
        ) from exc


@app.command()
def normalize(
    text: Annotated[
        str | None,
        typer.Argument(help="Hebrew text containing spelled-out numerals."),
    ] = None,
    number: Annotated[
        bool,
        typer.Option(
            "--number",
            "-n",
            help="Treat TEXT as a standalone numeral phrase.",
        ),
    ] = False,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to YAML config file."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Print diagnostics to stderr."),
    ] = False,
) -> None:
    """Print TEXT with every resolvable numeral expression rendered as digits."""

    logger: NormalizationLogger | None = None
    try:
        if text is None:
            raise NormalizerStageError(
                stage="input",
                detail="Missing TEXT argument.",
                hint='Pass the text to normalize, for example `hebrew-itn "חמש מאות"`.',
            )
        config = _resolve_config(config_file)
        if verbose:
            logger = NormalizationLogger(sink=sys.stderr, exclusive=True)
        normalizer = HebrewNormalizer(config, logger=logger)
        report = normalizer.normalize_with_report(text, standalone=number)
    except Exception as exc:
        if logger is not None:
            logger.close()
        exit_with_command_error("normalize", exc)

    typer.echo(report.normalized_text)
    if verbose:
        echo_report_summary(report)
    if logger is not None:
        logger.close()


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
